# FILE: roadmapx/roadmaps/schemas.py
"""
Roadmap module Pydantic schemas.

Nested create payloads mirror the ORM tree: roadmap -> phases ->
milestones -> resources.
"""
from datetime import datetime
from typing import Optional, List, Literal
from pydantic import BaseModel, ConfigDict, Field, HttpUrl

SkillLevel = Literal["beginner", "intermediate", "advanced"]
Preference = Literal["visual", "hands-on", "theoretical"]
ResourceType = Literal["link", "video", "document"]


# ============== RESOURCE ==============

class ResourceCreate(BaseModel):
    name: str
    url: HttpUrl
    type: ResourceType = "link"


class ResourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    url: str
    type: str


# ============== MILESTONE ==============

class MilestoneCreate(BaseModel):
    title: str
    description: Optional[str] = None
    order: int
    estimated_hours: Optional[int] = Field(None, ge=0)
    resources: Optional[List[ResourceCreate]] = None


class MilestoneOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    phase_id: str
    title: str
    description: Optional[str]
    order: int
    estimated_hours: Optional[int]
    completed: bool
    resources: List[ResourceOut] = []


class MilestoneUpdate(BaseModel):
    completed: bool


# ============== PHASE ==============

class PhaseCreate(BaseModel):
    title: str
    order: int
    duration: str
    description: Optional[str] = None
    milestones: List[MilestoneCreate] = []


class PhaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    roadmap_id: str
    title: str
    description: Optional[str]
    order: int
    duration: str
    status: str
    milestones: List[MilestoneOut] = []


# ============== ROADMAP ==============

class RoadmapCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    skills: List[str]
    goal: str = Field(..., min_length=1)
    time_frame: int = Field(..., gt=0)
    skill_level: SkillLevel
    preference: Preference
    phases: Optional[List[PhaseCreate]] = None


class RoadmapUpdate(BaseModel):
    """Partial update. Supplying `phases` replaces the whole phase tree."""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    skills: Optional[List[str]] = None
    goal: Optional[str] = Field(None, min_length=1)
    time_frame: Optional[int] = Field(None, gt=0)
    skill_level: Optional[SkillLevel] = None
    preference: Optional[Preference] = None
    phases: Optional[List[PhaseCreate]] = None


class RoadmapStatusUpdate(BaseModel):
    # Validated in the router so bad values give "Invalid status" rather than a schema error
    status: Optional[str] = None


class RoadmapOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    title: str
    description: Optional[str]
    skills: List[str]
    goal: str
    time_frame: int
    skill_level: str
    preference: str
    status: str
    created_at: datetime
    updated_at: datetime
    phases: List[PhaseOut] = []


class RoadmapListItem(RoadmapOut):
    phase_count: int
    progress_count: int


class ProgressBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    milestone_id: Optional[str]
    completed: bool
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime


class RoadmapDetail(RoadmapOut):
    progress: List[ProgressBrief] = []


# ============== AI GENERATION ==============

class GenerateRoadmapRequest(BaseModel):
    description: str = Field(..., min_length=10)
    goal: Optional[str] = None
    skill_level: Optional[SkillLevel] = None
    time_frame: Optional[int] = Field(None, gt=0)
    preferences: Optional[List[str]] = None


class AiAnalysisBrief(BaseModel):
    skills_detected: List[str]
    time_frame: int
    skill_level: str


class GenerateRoadmapResponse(BaseModel):
    message: str
    roadmap: RoadmapOut
    ai_analysis: AiAnalysisBrief


class AnalyzeRequest(BaseModel):
    description: Optional[str] = None


class InputAnalysisOut(BaseModel):
    skills: List[str]
    topics: List[str]
    sentiment: str
    sentiment_score: dict
    skill_level: str
    time_frame: int
    language: str


class AnalyzeSuggestions(BaseModel):
    recommended_skills: List[str]
    estimated_time_frame: str
    recommended_level: str
    motivation_level: str


class AnalyzeResponse(BaseModel):
    analysis: InputAnalysisOut
    suggestions: AnalyzeSuggestions


class ProgressInsights(BaseModel):
    completion_rate: float
    recommended_next_steps: List[str]


class AiRecommendations(BaseModel):
    skills_to_add: List[str]
    estimated_timeline: str
    learning_style: str


class EnhanceSuggestions(BaseModel):
    skill_gaps: List[str]
    progress_insights: ProgressInsights
    ai_recommendations: AiRecommendations


class EnhanceResponse(BaseModel):
    roadmap_id: str
    suggestions: EnhanceSuggestions
    ai_analysis: InputAnalysisOut
