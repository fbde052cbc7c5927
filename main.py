# FILE: main.py
"""
RoadmapX Backend - FastAPI Application
Version: 0.3.0

Features:
- Learning roadmaps with phases, milestones and resources
- Progress tracking and completion statistics
- File upload to S3 with presigned downloads
- Cognito access-token authentication (dev bypass via ROADMAPX_DEV_AUTH)
- Amazon Comprehend analysis and AI roadmap generation
- Amazon Personalize and SageMaker Pipelines management endpoints

Run with:
    uvicorn main:app --reload
"""
import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load .env FIRST before any other imports that might need env vars
load_dotenv()

from roadmapx import __version__, config
from roadmapx.db import init_db
from roadmapx.users.router import router as users_router
from roadmapx.roadmaps.router import router as roadmaps_router
from roadmapx.roadmaps.ai_router import router as roadmaps_ai_router
from roadmapx.progress.router import router as progress_router
from roadmapx.files.router import router as files_router
from roadmapx.ai.router import router as ai_router

logging.basicConfig(
    level=config.get_log_level(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("roadmapx")

app = FastAPI(
    title="RoadmapX API",
    version=__version__,
    description="Learning roadmaps, progress tracking and AWS AI-assisted roadmap generation",
)

# ====== CORS ======

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ====== ERRORS ======

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request validation failures are client errors: 400, not FastAPI's default 422."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


# ====== STARTUP ======

@app.on_event("startup")
def on_startup():
    os.makedirs("data", exist_ok=True)
    init_db()

    logger.info("[startup] RoadmapX %s", __version__)

    if config.dev_auth_enabled():
        logger.warning("[startup] ROADMAPX_DEV_AUTH is ON - all requests act as %s", config.DEV_USER["email"])
    else:
        cognito = config.get_cognito_settings()
        if cognito.user_pool_id and cognito.client_id:
            logger.info("[startup] Cognito: [OK] user pool %s", cognito.user_pool_id)
        else:
            logger.warning("[startup] Cognito: [X] COGNITO_USER_POOL_ID / COGNITO_CLIENT_ID not set")

    aws = config.get_aws_settings()
    if aws.access_key_id:
        logger.info("[startup] AWS credentials: [OK] from environment (%s)", aws.region)
    else:
        logger.info("[startup] AWS credentials: using default boto3 chain (%s)", aws.region)

    logger.info("[startup] S3 bucket: %s", config.get_storage_settings().bucket_name)

    ai = config.get_ai_settings()
    if not ai.sagemaker_role_arn:
        logger.info("[startup] SAGEMAKER_ROLE_ARN not set - pipeline creation disabled")
    if not ai.personalize_role_arn:
        logger.info("[startup] PERSONALIZE_ROLE_ARN not set - dataset imports will fail")
    if config.fake_comprehend_enabled():
        logger.warning("[startup] DEV_FAKE_COMPREHEND=1 - Comprehend failures return canned results")


# ====== ROUTERS ======

# AI generation routes first so /ai/* is not captured by /{roadmap_id}
app.include_router(roadmaps_ai_router)
app.include_router(roadmaps_router)
app.include_router(progress_router)
app.include_router(users_router)
app.include_router(files_router)
app.include_router(ai_router)


# ====== PUBLIC ENDPOINTS ======

@app.get("/ping")
def ping():
    """Health check (public)."""
    return {"status": "ok", "dev_auth": config.dev_auth_enabled()}


@app.get("/health")
def health():
    """Health check (public)."""
    return {"status": "ok", "version": __version__}
