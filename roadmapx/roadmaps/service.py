# FILE: roadmapx/roadmaps/service.py
"""
Roadmap service layer.

Every lookup is scoped by user_id: a roadmap owned by someone else is
indistinguishable from one that does not exist.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from roadmapx.roadmaps import models, schemas
from roadmapx.progress.models import Progress

logger = logging.getLogger(__name__)


# ============== BUILDERS ==============

def _build_phase(data: schemas.PhaseCreate) -> models.Phase:
    phase = models.Phase(
        title=data.title,
        description=data.description,
        order=data.order,
        duration=data.duration,
        status="upcoming",
    )
    for m in data.milestones:
        milestone = models.Milestone(
            title=m.title,
            description=m.description,
            order=m.order,
            estimated_hours=m.estimated_hours,
            completed=False,
        )
        for r in m.resources or []:
            milestone.resources.append(models.Resource(name=r.name, url=str(r.url), type=r.type))
        phase.milestones.append(milestone)
    return phase


# ============== ROADMAP ==============

def create_roadmap(db: Session, user_id: str, data: schemas.RoadmapCreate) -> models.Roadmap:
    roadmap = models.Roadmap(
        user_id=user_id,
        title=data.title,
        description=data.description,
        skills=list(data.skills),
        goal=data.goal,
        time_frame=data.time_frame,
        skill_level=data.skill_level,
        preference=data.preference,
        status="draft",
    )
    for phase in data.phases or []:
        roadmap.phases.append(_build_phase(phase))
    db.add(roadmap)
    db.commit()
    db.refresh(roadmap)
    logger.info("[roadmaps] Created roadmap %s with %d phases", roadmap.id, len(roadmap.phases))
    return roadmap


def get_roadmap(db: Session, user_id: str, roadmap_id: str) -> Optional[models.Roadmap]:
    return (
        db.query(models.Roadmap)
        .filter(models.Roadmap.id == roadmap_id, models.Roadmap.user_id == user_id)
        .first()
    )


def list_roadmaps(db: Session, user_id: str) -> List[models.Roadmap]:
    return (
        db.query(models.Roadmap)
        .filter(models.Roadmap.user_id == user_id)
        .order_by(models.Roadmap.created_at.desc())
        .all()
    )


def _replace_phases(db: Session, roadmap: models.Roadmap, phases: List[schemas.PhaseCreate]) -> None:
    # Detach progress entries from milestones that are about to disappear
    (
        db.query(Progress)
        .filter(Progress.roadmap_id == roadmap.id, Progress.milestone_id.isnot(None))
        .update({Progress.milestone_id: None}, synchronize_session="fetch")
    )
    roadmap.phases.clear()
    db.flush()
    for phase in phases:
        roadmap.phases.append(_build_phase(phase))


def update_roadmap(
    db: Session, user_id: str, roadmap_id: str, data: schemas.RoadmapUpdate
) -> Optional[models.Roadmap]:
    roadmap = get_roadmap(db, user_id, roadmap_id)
    if not roadmap:
        return None

    fields = data.model_dump(exclude_unset=True, exclude={"phases"})
    for key, value in fields.items():
        if value is not None:
            setattr(roadmap, key, value)

    if data.phases is not None:
        _replace_phases(db, roadmap, data.phases)

    roadmap.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(roadmap)
    return roadmap


def delete_roadmap(db: Session, user_id: str, roadmap_id: str) -> bool:
    roadmap = get_roadmap(db, user_id, roadmap_id)
    if not roadmap:
        return False
    db.delete(roadmap)
    db.commit()
    logger.info("[roadmaps] Deleted roadmap %s", roadmap_id)
    return True


def set_status(db: Session, user_id: str, roadmap_id: str, status: str) -> Optional[models.Roadmap]:
    if status not in models.ROADMAP_STATUSES:
        raise ValueError(f"Invalid status: {status}")
    roadmap = get_roadmap(db, user_id, roadmap_id)
    if not roadmap:
        return None
    roadmap.status = status
    db.commit()
    db.refresh(roadmap)
    return roadmap


# ============== MILESTONE ==============

def get_milestone(db: Session, user_id: str, milestone_id: str) -> Optional[models.Milestone]:
    return (
        db.query(models.Milestone)
        .join(models.Phase, models.Milestone.phase_id == models.Phase.id)
        .join(models.Roadmap, models.Phase.roadmap_id == models.Roadmap.id)
        .filter(models.Milestone.id == milestone_id, models.Roadmap.user_id == user_id)
        .first()
    )


def set_milestone_completed(
    db: Session, user_id: str, milestone_id: str, completed: bool
) -> Optional[models.Milestone]:
    milestone = get_milestone(db, user_id, milestone_id)
    if not milestone:
        return None
    milestone.completed = completed
    milestone.phase.roadmap.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(milestone)
    return milestone
