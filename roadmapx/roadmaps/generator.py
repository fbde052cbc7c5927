# FILE: roadmapx/roadmaps/generator.py
"""
Roadmap generation from a free-text description.

Comprehend supplies entities, key phrases, sentiment and language. Keyword
checks and one duration regex turn that into a title, goal, learning
preference, skill level and timeframe, then a fixed four-phase template is
filled in:

    1. Foundations & Basics
    2. Core Concepts
    3. Practical Application
    4. Advanced Topics & Mastery

Everything after the Comprehend call is deterministic.
"""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from roadmapx.ai import comprehend
from roadmapx.roadmaps import models, schemas, service

logger = logging.getLogger(__name__)


DEFAULT_TIME_FRAME = 12  # weeks
PHASE_COUNT = 4

# Entity types Comprehend uses for technologies and products
SKILL_ENTITY_TYPES = {"ORGANIZATION", "OTHER"}
SKILL_ENTITY_KEYWORDS = ("javascript", "python", "react", "node", "database", "api")

COMMON_SKILLS = [
    "JavaScript", "Python", "Java", "React", "Node.js", "TypeScript",
    "AWS", "Docker", "Kubernetes", "Machine Learning", "Data Science",
    "Full Stack", "Frontend", "Backend", "DevOps", "Cloud Computing",
    "Database", "SQL", "MongoDB", "PostgreSQL", "API Development",
]

TIME_FRAME_RE = re.compile(r"(\d+)\s*(week|month|year)", re.IGNORECASE)
GOAL_RE = re.compile(r"(?:become|be a)\s+([^.]+)", re.IGNORECASE)

WEEKS_PER_UNIT = {"week": 1, "month": 4, "year": 52}


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class InputAnalysis:
    skills: List[str]
    topics: List[str]
    sentiment: str
    sentiment_score: Dict[str, float]
    skill_level: str
    time_frame: int
    language: str

    def to_schema(self) -> schemas.InputAnalysisOut:
        return schemas.InputAnalysisOut(
            skills=self.skills,
            topics=self.topics,
            sentiment=self.sentiment,
            sentiment_score=self.sentiment_score,
            skill_level=self.skill_level,
            time_frame=self.time_frame,
            language=self.language,
        )


@dataclass
class GeneratedMilestone:
    title: str
    description: str
    order: int
    estimated_hours: Optional[int] = None


@dataclass
class GeneratedPhase:
    title: str
    order: int
    duration: str
    description: str
    milestones: List[GeneratedMilestone] = field(default_factory=list)


@dataclass
class GeneratedRoadmap:
    title: str
    description: str
    skills: List[str]
    goal: str
    time_frame: int
    skill_level: str
    preference: str
    phases: List[GeneratedPhase] = field(default_factory=list)

    def to_create_schema(self) -> schemas.RoadmapCreate:
        return schemas.RoadmapCreate(
            title=self.title,
            description=self.description,
            skills=self.skills,
            goal=self.goal,
            time_frame=self.time_frame,
            skill_level=self.skill_level,
            preference=self.preference,
            phases=[
                schemas.PhaseCreate(
                    title=p.title,
                    order=p.order,
                    duration=p.duration,
                    description=p.description,
                    milestones=[
                        schemas.MilestoneCreate(
                            title=m.title,
                            description=m.description,
                            order=m.order,
                            estimated_hours=m.estimated_hours,
                        )
                        for m in p.milestones
                    ],
                )
                for p in self.phases
            ],
        )


# =============================================================================
# TEXT HEURISTICS
# =============================================================================

def extract_skills_from_text(text: str) -> List[str]:
    """Fallback skill detection: COMMON_SKILLS found as substrings, in list order."""
    lower = text.lower()
    return [skill for skill in COMMON_SKILLS if skill.lower() in lower]


def skills_from_entities(entities: List[dict]) -> List[str]:
    skills = []
    for entity in entities or []:
        if entity.get("Type") not in SKILL_ENTITY_TYPES:
            continue
        text = entity.get("Text") or ""
        if any(k in text.lower() for k in SKILL_ENTITY_KEYWORDS):
            skills.append(text)
    return skills


def detect_skill_level(text: str) -> str:
    lower = text.lower()
    if "advanced" in lower or "expert" in lower:
        return "advanced"
    if "intermediate" in lower or "some experience" in lower:
        return "intermediate"
    return "beginner"


def extract_time_frame(text: str) -> int:
    """Weeks mentioned in text ("3 months" -> 12). Defaults to 12 weeks."""
    match = TIME_FRAME_RE.search(text)
    if not match:
        return DEFAULT_TIME_FRAME
    weeks = int(match.group(1)) * WEEKS_PER_UNIT[match.group(2).lower()]
    return weeks or DEFAULT_TIME_FRAME


def extract_goal(description: str, topics: List[str]) -> str:
    lower = description.lower()
    if "become" in lower or "be a" in lower:
        match = GOAL_RE.search(description)
        if match and match.group(1).strip():
            return match.group(1).strip()
    if topics:
        return f"Master {topics[0]}"
    return "Achieve learning goals"


def detect_preference(description: str) -> str:
    lower = description.lower()
    if any(k in lower for k in ("visual", "video", "watch")):
        return "visual"
    if any(k in lower for k in ("theory", "understand", "concept")):
        return "theoretical"
    return "hands-on"


def generate_title(skills: List[str], goal: str) -> str:
    if skills:
        return f"{skills[0]} Learning Path"
    if goal:
        return goal
    return "Learning Roadmap"


# =============================================================================
# ANALYSIS
# =============================================================================

def analyze_user_input(description: str) -> InputAnalysis:
    """Run Comprehend on description and extract roadmap-relevant signals."""
    analysis = comprehend.analyze_text(description)

    skills = skills_from_entities(analysis.get("entities") or [])
    topics = [p["Text"] for p in analysis.get("key_phrases") or [] if p.get("Text")]

    sentiment = analysis.get("sentiment") or {}
    languages = analysis.get("language") or []

    return InputAnalysis(
        skills=skills or extract_skills_from_text(description),
        topics=topics,
        sentiment=sentiment.get("Sentiment") or "NEUTRAL",
        sentiment_score=sentiment.get("SentimentScore") or {},
        skill_level=detect_skill_level(description),
        time_frame=extract_time_frame(description),
        language=(languages[0].get("LanguageCode") if languages else None) or "en",
    )


# =============================================================================
# MILESTONE TEMPLATES
# =============================================================================

def _foundation_milestones(skills: List[str], skill_level: str) -> List[GeneratedMilestone]:
    milestones = []
    if skill_level == "beginner":
        milestones.append(GeneratedMilestone(
            "Set up development environment",
            "Install necessary tools and configure your workspace",
            1, 4,
        ))
        milestones.append(GeneratedMilestone(
            "Learn basic concepts",
            "Understand fundamental principles and terminology",
            2, 20,
        ))
    else:
        milestones.append(GeneratedMilestone(
            "Review prerequisites",
            "Ensure you have the required foundational knowledge",
            1, 8,
        ))

    if skills:
        milestones.append(GeneratedMilestone(
            f"Introduction to {skills[0]}",
            f"Get started with {skills[0]} basics",
            len(milestones) + 1, 15,
        ))
    return milestones


def _core_milestones(skills: List[str], topics: List[str]) -> List[GeneratedMilestone]:
    milestones = [
        GeneratedMilestone(
            f"Master {skill} fundamentals",
            f"Deep dive into core {skill} concepts",
            i + 1, 30,
        )
        for i, skill in enumerate(skills)
    ]
    if topics:
        milestones.append(GeneratedMilestone(
            f"Explore {topics[0]}",
            f"Learn about {topics[0]}",
            len(milestones) + 1, 25,
        ))
    return milestones


def _practical_milestones(skills: List[str], skill_level: str) -> List[GeneratedMilestone]:
    milestones = [GeneratedMilestone(
        "Build first project",
        "Create a simple project to practice what you've learned",
        1, 40,
    )]
    if skill_level != "beginner":
        milestones.append(GeneratedMilestone(
            "Build intermediate project",
            "Create a more complex project demonstrating your skills",
            2, 60,
        ))
    if skills:
        milestones.append(GeneratedMilestone(
            f"Apply {skills[0]} in real-world scenario",
            f"Use {skills[0]} to solve practical problems",
            len(milestones) + 1, 50,
        ))
    return milestones


def _advanced_milestones(skill_level: str) -> List[GeneratedMilestone]:
    if skill_level == "advanced":
        first = GeneratedMilestone(
            "Master advanced techniques",
            "Explore advanced concepts and best practices",
            1, 50,
        )
    else:
        first = GeneratedMilestone(
            "Explore advanced topics",
            "Learn about advanced concepts and techniques",
            1, 40,
        )
    return [
        first,
        GeneratedMilestone(
            "Build portfolio project",
            "Create a comprehensive project for your portfolio",
            2, 80,
        ),
        GeneratedMilestone(
            "Prepare for next steps",
            "Review your progress and plan future learning",
            3, 10,
        ),
    ]


def generate_phases(
    skills: List[str],
    topics: List[str],
    skill_level: str,
    time_frame: int,
) -> List[GeneratedPhase]:
    duration = f"{math.ceil(time_frame / PHASE_COUNT)} weeks"
    return [
        GeneratedPhase(
            "Foundations & Basics", 1, duration,
            "Learn the fundamental concepts and set up your development environment",
            _foundation_milestones(skills, skill_level),
        ),
        GeneratedPhase(
            "Core Concepts", 2, duration,
            "Deep dive into core topics and build understanding",
            _core_milestones(skills, topics),
        ),
        GeneratedPhase(
            "Practical Application", 3, duration,
            "Build projects and apply what you've learned",
            _practical_milestones(skills, skill_level),
        ),
        GeneratedPhase(
            "Advanced Topics & Mastery", 4, duration,
            "Explore advanced concepts and refine your skills",
            _advanced_milestones(skill_level),
        ),
    ]


# =============================================================================
# GENERATION
# =============================================================================

def generate_roadmap(
    description: str,
    goal: Optional[str] = None,
    skill_level: Optional[str] = None,
    time_frame: Optional[int] = None,
    preferences: Optional[List[str]] = None,
) -> GeneratedRoadmap:
    """
    Build a roadmap from description. Explicit goal, skill_level and
    time_frame override what the analysis detects.
    """
    analysis = analyze_user_input(description)

    goal = goal or extract_goal(description, analysis.topics)
    preference = detect_preference(description)
    level = skill_level or analysis.skill_level
    weeks = time_frame or analysis.time_frame

    if preferences:
        logger.debug("[generator] Ignoring free-form preferences %s; preference derived from text", preferences)

    return GeneratedRoadmap(
        title=generate_title(analysis.skills, goal),
        description=description,
        skills=analysis.skills,
        goal=goal,
        time_frame=weeks,
        skill_level=level,
        preference=preference,
        phases=generate_phases(analysis.skills, analysis.topics, level, weeks),
    )


def create_roadmap_in_database(db: Session, user_id: str, generated: GeneratedRoadmap) -> models.Roadmap:
    """Persist a generated roadmap as a draft with upcoming phases."""
    return service.create_roadmap(db, user_id, generated.to_create_schema())


# =============================================================================
# ENHANCEMENT
# =============================================================================

def enhance_roadmap(roadmap: models.Roadmap) -> schemas.EnhanceResponse:
    """Re-analyze a roadmap's description and goal and suggest improvements."""
    analysis = analyze_user_input(f"{roadmap.description or ''} {roadmap.goal}")

    existing = [s.lower() for s in roadmap.skills or []]
    skill_gaps = [
        skill for skill in analysis.skills
        if not any(skill.lower() in rs for rs in existing)
    ]

    entries = roadmap.progress
    completion_rate = sum(1 for p in entries if p.completed) / len(entries) if entries else 0.0
    next_steps = [p.title for p in roadmap.phases if p.status == "upcoming"][:2]

    return schemas.EnhanceResponse(
        roadmap_id=roadmap.id,
        suggestions=schemas.EnhanceSuggestions(
            skill_gaps=skill_gaps,
            progress_insights=schemas.ProgressInsights(
                completion_rate=completion_rate,
                recommended_next_steps=next_steps,
            ),
            ai_recommendations=schemas.AiRecommendations(
                skills_to_add=analysis.skills[:3],
                estimated_timeline=f"{analysis.time_frame} weeks",
                learning_style="accelerated" if analysis.sentiment == "POSITIVE" else "steady",
            ),
        ),
        ai_analysis=analysis.to_schema(),
    )
