# roadmapx/progress/models.py
"""
Progress entries: a user's completion record against a roadmap.

`milestone_id` is optional; when set the entry tracks one milestone and
its `completed` flag is mirrored onto that milestone.
"""

from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, Text, ForeignKey, DateTime, Boolean
from sqlalchemy.orm import relationship
from roadmapx.db import Base


class Progress(Base):
    __tablename__ = "progress"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    roadmap_id = Column(String(36), ForeignKey("roadmaps.id", ondelete="CASCADE"), nullable=False, index=True)
    milestone_id = Column(String(36), ForeignKey("milestones.id", ondelete="SET NULL"), nullable=True, index=True)
    completed = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="progress")
    roadmap = relationship("Roadmap", back_populates="progress")
    milestone = relationship("Milestone")
