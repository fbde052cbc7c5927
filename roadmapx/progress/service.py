# FILE: roadmapx/progress/service.py
"""
Progress service layer.

Entries that reference a milestone keep that milestone's `completed` flag in
step with the entry, and roadmap statistics are computed from milestone
flags.
"""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from roadmapx.progress import models, schemas
from roadmapx.roadmaps import models as roadmap_models

logger = logging.getLogger(__name__)


class InvalidMilestoneError(Exception):
    """Milestone does not belong to the roadmap the entry is recorded against."""
    pass


def _rate(done: int, total: int) -> int:
    return round(done / total * 100) if total > 0 else 0


def _sync_milestone(entry: models.Progress) -> None:
    if entry.milestone is not None:
        entry.milestone.completed = entry.completed


def list_progress(db: Session, user_id: str, roadmap_id: str) -> List[models.Progress]:
    return (
        db.query(models.Progress)
        .filter(models.Progress.user_id == user_id, models.Progress.roadmap_id == roadmap_id)
        .order_by(models.Progress.created_at.asc())
        .all()
    )


def get_progress(db: Session, user_id: str, progress_id: str) -> Optional[models.Progress]:
    return (
        db.query(models.Progress)
        .filter(models.Progress.id == progress_id, models.Progress.user_id == user_id)
        .first()
    )


def create_progress(
    db: Session, user_id: str, roadmap: roadmap_models.Roadmap, data: schemas.ProgressCreate
) -> models.Progress:
    milestone = None
    if data.milestone_id:
        milestones = {m.id: m for phase in roadmap.phases for m in phase.milestones}
        milestone = milestones.get(data.milestone_id)
        if milestone is None:
            raise InvalidMilestoneError(data.milestone_id)

    entry = models.Progress(
        user_id=user_id,
        roadmap_id=roadmap.id,
        milestone=milestone,
        completed=data.completed,
        notes=data.notes,
    )
    db.add(entry)
    _sync_milestone(entry)
    db.commit()
    db.refresh(entry)
    return entry


def update_progress(
    db: Session, user_id: str, progress_id: str, data: schemas.ProgressUpdate
) -> Optional[models.Progress]:
    entry = get_progress(db, user_id, progress_id)
    if not entry:
        return None
    entry.completed = data.completed
    if data.notes is not None:
        entry.notes = data.notes
    entry.updated_at = datetime.utcnow()
    _sync_milestone(entry)
    db.commit()
    db.refresh(entry)
    return entry


def delete_progress(db: Session, user_id: str, progress_id: str) -> bool:
    entry = get_progress(db, user_id, progress_id)
    if not entry:
        return False
    db.delete(entry)
    db.commit()
    return True


def get_stats(roadmap: roadmap_models.Roadmap) -> schemas.ProgressStats:
    phase_stats = []
    total = 0
    done = 0
    for phase in roadmap.phases:
        phase_total = len(phase.milestones)
        phase_done = sum(1 for m in phase.milestones if m.completed)
        total += phase_total
        done += phase_done
        phase_stats.append(schemas.PhaseStats(
            phase_id=phase.id,
            title=phase.title,
            total_milestones=phase_total,
            completed_milestones=phase_done,
            completion_rate=_rate(phase_done, phase_total),
        ))

    return schemas.ProgressStats(
        total_milestones=total,
        completed_milestones=done,
        completion_rate=_rate(done, total),
        phase_stats=phase_stats,
        last_updated=roadmap.updated_at,
    )
