# FILE: roadmapx/progress/schemas.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict


class ProgressCreate(BaseModel):
    completed: bool
    notes: Optional[str] = None
    milestone_id: Optional[str] = None


class ProgressUpdate(BaseModel):
    completed: bool
    notes: Optional[str] = None


class RoadmapRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    status: str


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    roadmap_id: str
    milestone_id: Optional[str]
    completed: bool
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class ProgressWithRoadmap(ProgressOut):
    roadmap: RoadmapRef


class PhaseStats(BaseModel):
    phase_id: str
    title: str
    total_milestones: int
    completed_milestones: int
    completion_rate: int


class ProgressStats(BaseModel):
    total_milestones: int
    completed_milestones: int
    completion_rate: int
    phase_stats: List[PhaseStats]
    last_updated: datetime
