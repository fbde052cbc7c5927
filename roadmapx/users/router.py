# file: roadmapx/users/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from roadmapx.db import get_db
from roadmapx.auth import require_user
from roadmapx.users import service, schemas
from roadmapx.users.models import User

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile", response_model=schemas.ProfileOut)
def get_profile(user: User = Depends(require_user), db: Session = Depends(get_db)):
    current = service.get_user(db, user.id)
    if not current:
        raise HTTPException(status_code=404, detail="User not found")
    profile = schemas.ProfileOut.model_validate(current)
    profile.roadmap_count = len(current.roadmaps)
    profile.progress_count = len(current.progress)
    return profile


@router.put("/profile", response_model=schemas.UserOut)
def update_profile(
    data: schemas.ProfileUpdate,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        return service.update_profile(db, user, data)
    except service.EmailAlreadyExistsError:
        raise HTTPException(status_code=400, detail="Email already exists")


@router.get("/stats", response_model=schemas.UserStats)
def get_stats(user: User = Depends(require_user)):
    return service.get_stats(user)
