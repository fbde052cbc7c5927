# file: roadmapx/progress/router.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from roadmapx.db import get_db
from roadmapx.auth import require_user
from roadmapx.progress import service, schemas
from roadmapx.roadmaps import service as roadmap_service
from roadmapx.users.models import User

router = APIRouter(prefix="/api/progress", tags=["progress"])


@router.get("/stats/{roadmap_id}", response_model=schemas.ProgressStats)
def get_stats(roadmap_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    roadmap = roadmap_service.get_roadmap(db, user.id, roadmap_id)
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    return service.get_stats(roadmap)


@router.get("/{roadmap_id}", response_model=List[schemas.ProgressWithRoadmap])
def list_progress(roadmap_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return service.list_progress(db, user.id, roadmap_id)


@router.post("/{roadmap_id}", response_model=schemas.ProgressOut, status_code=201)
def create_progress(
    roadmap_id: str,
    data: schemas.ProgressCreate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    roadmap = roadmap_service.get_roadmap(db, user.id, roadmap_id)
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")
    try:
        return service.create_progress(db, user.id, roadmap, data)
    except service.InvalidMilestoneError:
        raise HTTPException(status_code=400, detail="Milestone does not belong to this roadmap")


@router.put("/{progress_id}", response_model=schemas.ProgressOut)
def update_progress(
    progress_id: str,
    data: schemas.ProgressUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    entry = service.update_progress(db, user.id, progress_id, data)
    if not entry:
        raise HTTPException(status_code=404, detail="Progress entry not found")
    return entry


@router.delete("/{progress_id}", status_code=204)
def delete_progress(progress_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    success = service.delete_progress(db, user.id, progress_id)
    if not success:
        raise HTTPException(status_code=404, detail="Progress entry not found")
    return None
