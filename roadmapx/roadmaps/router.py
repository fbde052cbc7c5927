# file: roadmapx/roadmaps/router.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from roadmapx.db import get_db
from roadmapx.auth import require_user
from roadmapx.roadmaps import service, schemas
from roadmapx.users.models import User

router = APIRouter(prefix="/api/roadmaps", tags=["roadmaps"])


# ============== ROADMAPS ==============

@router.get("", response_model=List[schemas.RoadmapListItem])
def list_roadmaps(user: User = Depends(require_user), db: Session = Depends(get_db)):
    return service.list_roadmaps(db, user.id)


@router.post("", response_model=schemas.RoadmapOut, status_code=201)
def create_roadmap(
    data: schemas.RoadmapCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return service.create_roadmap(db, user.id, data)


@router.get("/{roadmap_id}", response_model=schemas.RoadmapDetail)
def get_roadmap(roadmap_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    roadmap = service.get_roadmap(db, user.id, roadmap_id)
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return roadmap


@router.put("/{roadmap_id}", response_model=schemas.RoadmapOut)
def update_roadmap(
    roadmap_id: str,
    data: schemas.RoadmapUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    roadmap = service.update_roadmap(db, user.id, roadmap_id, data)
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return roadmap


@router.delete("/{roadmap_id}", status_code=204)
def delete_roadmap(roadmap_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    success = service.delete_roadmap(db, user.id, roadmap_id)
    if not success:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return None


@router.patch("/{roadmap_id}/status", response_model=schemas.RoadmapOut)
def update_status(
    roadmap_id: str,
    data: schemas.RoadmapStatusUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        roadmap = service.set_status(db, user.id, roadmap_id, data.status)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid status")
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return roadmap


# ============== MILESTONES ==============

@router.patch("/milestones/{milestone_id}", response_model=schemas.MilestoneOut)
def update_milestone(
    milestone_id: str,
    data: schemas.MilestoneUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    """Mark a milestone complete or incomplete."""
    milestone = service.set_milestone_completed(db, user.id, milestone_id, data.completed)
    if not milestone:
        raise HTTPException(status_code=404, detail="Milestone not found")
    return milestone
