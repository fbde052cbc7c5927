# roadmapx/roadmaps/models.py
"""
SQLAlchemy ORM models for roadmaps.

Tree: Roadmap -> Phase -> Milestone -> Resource. Child collections are
ordered by their `order` column so API output never needs re-sorting.
"""

from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime, Boolean, JSON
from sqlalchemy.orm import relationship
from roadmapx.db import Base


def _uuid() -> str:
    return str(uuid4())


ROADMAP_STATUSES = ("draft", "active", "completed")
SKILL_LEVELS = ("beginner", "intermediate", "advanced")
PREFERENCES = ("visual", "hands-on", "theoretical")
RESOURCE_TYPES = ("link", "video", "document")


class Roadmap(Base):
    __tablename__ = "roadmaps"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    skills = Column(JSON, default=list, nullable=False)  # list[str]
    goal = Column(String(500), nullable=False)
    time_frame = Column(Integer, nullable=False)  # weeks
    skill_level = Column(String(20), nullable=False)
    preference = Column(String(20), nullable=False)
    status = Column(String(20), default="draft", nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="roadmaps")
    phases = relationship(
        "Phase",
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="Phase.order",
    )
    progress = relationship("Progress", back_populates="roadmap", cascade="all, delete-orphan")

    @property
    def phase_count(self) -> int:
        return len(self.phases)

    @property
    def progress_count(self) -> int:
        return len(self.progress)


class Phase(Base):
    __tablename__ = "phases"

    id = Column(String(36), primary_key=True, default=_uuid)
    roadmap_id = Column(String(36), ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False)
    duration = Column(String(50), nullable=False)  # free text, e.g. "3 weeks"
    status = Column(String(20), default="upcoming", nullable=False)  # upcoming | in-progress | completed

    roadmap = relationship("Roadmap", back_populates="phases")
    milestones = relationship(
        "Milestone",
        back_populates="phase",
        cascade="all, delete-orphan",
        order_by="Milestone.order",
    )


class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(String(36), primary_key=True, default=_uuid)
    phase_id = Column(String(36), ForeignKey("phases.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False)
    estimated_hours = Column(Integer, nullable=True)
    completed = Column(Boolean, default=False, nullable=False)

    phase = relationship("Phase", back_populates="milestones")
    resources = relationship("Resource", back_populates="milestone", cascade="all, delete-orphan")


class Resource(Base):
    __tablename__ = "resources"

    id = Column(String(36), primary_key=True, default=_uuid)
    milestone_id = Column(String(36), ForeignKey("milestones.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    url = Column(String(2048), nullable=False)
    type = Column(String(20), default="link", nullable=False)

    milestone = relationship("Milestone", back_populates="resources")
