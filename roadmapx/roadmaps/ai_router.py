# FILE: roadmapx/roadmaps/ai_router.py
"""
AI-assisted roadmap endpoints.

- POST /api/roadmaps/ai/generate     - analyze a description and save a draft roadmap
- POST /api/roadmaps/ai/analyze      - analysis preview, nothing saved
- POST /api/roadmaps/{id}/ai/enhance - suggestions for an existing roadmap
"""
import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from roadmapx.db import get_db
from roadmapx.auth import require_user
from roadmapx.roadmaps import generator, schemas, service
from roadmapx.users.models import User

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roadmaps", tags=["roadmaps-ai"])

AWS_ERRORS = (BotoCoreError, ClientError)

COMPREHEND_HINT = (
    "Make sure Amazon Comprehend is configured correctly "
    "(AWS_REGION and credentials), or set DEV_FAKE_COMPREHEND=1 for local development"
)


@router.post("/ai/generate", response_model=schemas.GenerateRoadmapResponse, status_code=201)
def generate_roadmap(
    data: schemas.GenerateRoadmapRequest,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    try:
        generated = generator.generate_roadmap(
            description=data.description,
            goal=data.goal,
            skill_level=data.skill_level,
            time_frame=data.time_frame,
            preferences=data.preferences,
        )
    except AWS_ERRORS as e:
        logger.exception("[roadmaps.ai] Roadmap generation failed")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to generate roadmap", "message": str(e), "hint": COMPREHEND_HINT},
        )

    try:
        roadmap = generator.create_roadmap_in_database(db, user.id, generated)
    except (ValidationError, SQLAlchemyError) as e:
        db.rollback()
        logger.exception("[roadmaps.ai] Saving generated roadmap failed")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to generate roadmap", "message": str(e), "hint": COMPREHEND_HINT},
        )

    logger.info("[roadmaps.ai] Generated roadmap %s (%s skills detected)", roadmap.id, len(generated.skills))

    return schemas.GenerateRoadmapResponse(
        message="Roadmap generated successfully using AI",
        roadmap=schemas.RoadmapOut.model_validate(roadmap),
        ai_analysis=schemas.AiAnalysisBrief(
            skills_detected=generated.skills,
            time_frame=generated.time_frame,
            skill_level=generated.skill_level,
        ),
    )


@router.post("/ai/analyze", response_model=schemas.AnalyzeResponse)
def analyze_description(data: schemas.AnalyzeRequest, user: User = Depends(require_user)):
    if not data.description:
        raise HTTPException(status_code=400, detail="Description is required")

    try:
        analysis = generator.analyze_user_input(data.description)
    except AWS_ERRORS as e:
        logger.exception("[roadmaps.ai] Analysis failed")
        raise HTTPException(status_code=500, detail={"error": "Failed to analyze input", "message": str(e)})

    return schemas.AnalyzeResponse(
        analysis=analysis.to_schema(),
        suggestions=schemas.AnalyzeSuggestions(
            recommended_skills=analysis.skills,
            estimated_time_frame=f"{analysis.time_frame} weeks",
            recommended_level=analysis.skill_level,
            motivation_level=analysis.sentiment,
        ),
    )


@router.post("/{roadmap_id}/ai/enhance", response_model=schemas.EnhanceResponse)
def enhance_roadmap(roadmap_id: str, user: User = Depends(require_user), db: Session = Depends(get_db)):
    roadmap = service.get_roadmap(db, user.id, roadmap_id)
    if not roadmap:
        raise HTTPException(status_code=404, detail="Roadmap not found")

    try:
        return generator.enhance_roadmap(roadmap)
    except AWS_ERRORS as e:
        logger.exception("[roadmaps.ai] Enhancement failed for %s", roadmap_id)
        raise HTTPException(status_code=500, detail={"error": "Failed to enhance roadmap", "message": str(e)})
