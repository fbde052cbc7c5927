# FILE: roadmapx/users/schemas.py
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    cognito_id: str
    email: str
    name: Optional[str]
    created_at: datetime
    updated_at: datetime


class ProfileOut(UserOut):
    roadmap_count: int = 0
    progress_count: int = 0


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")


class RoadmapStats(BaseModel):
    total: int
    active: int
    completed: int
    draft: int


class ProgressSummary(BaseModel):
    total_milestones: int
    completed_milestones: int
    completion_rate: int


class UserStats(BaseModel):
    roadmap_stats: RoadmapStats
    progress_stats: ProgressSummary
    joined_at: datetime
