# FILE: roadmapx/users/service.py
"""
User service layer.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from roadmapx.users import models, schemas

logger = logging.getLogger(__name__)


class EmailAlreadyExistsError(Exception):
    """Another user already owns the requested email."""
    pass


def get_user(db: Session, user_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.id == user_id).first()


def get_user_by_cognito_id(db: Session, cognito_id: str) -> Optional[models.User]:
    return db.query(models.User).filter(models.User.cognito_id == cognito_id).first()


def upsert_user(db: Session, cognito_id: str, email: str, name: Optional[str] = None) -> models.User:
    """
    Return the user for cognito_id, creating it on first sight.

    Existing users keep their stored email/name: profile edits made through
    the API win over identity-provider attributes.
    """
    user = get_user_by_cognito_id(db, cognito_id)
    if user:
        return user

    user = models.User(cognito_id=cognito_id, email=email, name=name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent first request for the same identity
        db.rollback()
        user = get_user_by_cognito_id(db, cognito_id)
        if user is None:
            raise
        return user
    db.refresh(user)
    logger.info("[users] Created user %s for identity %s", user.id, cognito_id)
    return user


def update_profile(db: Session, user: models.User, data: schemas.ProfileUpdate) -> models.User:
    if data.name:
        user.name = data.name
    if data.email:
        user.email = data.email
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailAlreadyExistsError(data.email)
    db.refresh(user)
    return user


def _rate(done: int, total: int) -> int:
    return round(done / total * 100) if total > 0 else 0


def get_stats(user: models.User) -> schemas.UserStats:
    statuses = [r.status for r in user.roadmaps]
    completed_entries = sum(1 for p in user.progress if p.completed)

    return schemas.UserStats(
        roadmap_stats=schemas.RoadmapStats(
            total=len(statuses),
            active=statuses.count("active"),
            completed=statuses.count("completed"),
            draft=statuses.count("draft"),
        ),
        progress_stats=schemas.ProgressSummary(
            total_milestones=len(user.progress),
            completed_milestones=completed_entries,
            completion_rate=_rate(completed_entries, len(user.progress)),
        ),
        joined_at=user.created_at,
    )
