# FILE: roadmapx/ai/router.py
"""
Managed AI service endpoints.

- /api/ai/comprehend/*  - text analysis (works without S3)
- /api/ai/personalize/* - recommendation dataset groups, imports, training
- /api/ai/sagemaker/*   - training pipelines
"""
import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import APIRouter, Depends, HTTPException

from roadmapx.auth import require_user
from roadmapx.config import get_ai_settings
from roadmapx.ai import comprehend, personalize, sagemaker, schemas

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/ai",
    tags=["ai"],
    dependencies=[Depends(require_user)],
)

AWS_ERRORS = (BotoCoreError, ClientError)


def _service_error(error: str, exc: Exception, hint: str = None) -> HTTPException:
    logger.error("[ai] %s: %s", error, exc)
    detail = {"error": error, "message": str(exc)}
    if hint:
        detail["hint"] = hint
    return HTTPException(status_code=500, detail=detail)


def _s3_not_configured(message: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": "S3 not configured",
            "message": message,
            "suggestion": "Use /api/ai/comprehend/* endpoints instead - they work without S3",
        },
    )


# ============== COMPREHEND ==============

@router.post("/comprehend/analyze", response_model=schemas.AnalyzeTextResponse, response_model_exclude_none=True)
def analyze_text(data: schemas.AnalyzeTextRequest):
    try:
        result = comprehend.analyze_text(data.text)
    except AWS_ERRORS as e:
        raise _service_error("Failed to analyze text", e)

    response = schemas.AnalyzeTextResponse(language=result["language"])
    if data.include_sentiment:
        response.sentiment = result["sentiment"]
    if data.include_entities:
        response.entities = result["entities"]
    if data.include_key_phrases:
        response.key_phrases = result["key_phrases"]
    return response


@router.post("/comprehend/sentiment")
def detect_sentiment(data: schemas.SentimentRequest):
    if not data.text:
        raise HTTPException(status_code=400, detail="Text is required")
    try:
        return comprehend.detect_sentiment(data.text)
    except AWS_ERRORS as e:
        raise _service_error("Failed to detect sentiment", e)


@router.post("/comprehend/batch-sentiment")
def batch_sentiment(data: schemas.BatchSentimentRequest):
    try:
        return comprehend.batch_detect_sentiment(data.texts, data.language_code or "en")
    except AWS_ERRORS as e:
        raise _service_error("Failed to analyze sentiments", e)


# ============== PERSONALIZE ==============

@router.post("/personalize/dataset-group", response_model=schemas.DatasetGroupResponse)
def create_dataset_group(data: schemas.DatasetGroupRequest):
    try:
        arn = personalize.create_dataset_group(data.name)
    except AWS_ERRORS as e:
        raise _service_error("Failed to create dataset group", e)
    return schemas.DatasetGroupResponse(dataset_group_arn=arn, message="Dataset group created successfully")


@router.get("/personalize/dataset-group/{arn:path}/status")
def get_dataset_group_status(arn: str):
    try:
        return personalize.get_dataset_group_status(arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to get status", e)


@router.post("/personalize/import", response_model=schemas.ImportDatasetResponse)
def import_dataset(data: schemas.ImportDatasetRequest):
    if not data.dataset_arn or not data.data or not data.s3_key:
        raise HTTPException(status_code=400, detail="dataset_arn, data, and s3_key are required")
    if not get_ai_settings().s3_bucket:
        raise _s3_not_configured("Personalize requires S3. Please configure S3_BUCKET_NAME in .env")

    try:
        job_arn = personalize.import_dataset(data.dataset_arn, data.data, data.s3_key)
    except personalize.StorageNotConfiguredError as e:
        raise _s3_not_configured(str(e))
    except (personalize.S3UploadError, *AWS_ERRORS) as e:
        raise _service_error("Failed to import dataset", e, hint="Check that S3 is configured correctly")
    return schemas.ImportDatasetResponse(import_job_arn=job_arn, message="Dataset import job started")


@router.post("/personalize/solution", response_model=schemas.ArnResponse)
def create_solution(data: schemas.SolutionRequest):
    try:
        arn = personalize.create_solution(data.dataset_group_arn, data.name, data.recipe_arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to create solution", e)
    return schemas.ArnResponse(arn=arn, message="Solution created")


@router.post("/personalize/solution/version", response_model=schemas.ArnResponse)
def create_solution_version(data: schemas.SolutionVersionRequest):
    try:
        arn = personalize.create_solution_version(data.solution_arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to start training", e)
    return schemas.ArnResponse(arn=arn, message="Solution version training started")


@router.get("/personalize/solution/{arn:path}/status")
def get_solution_status(arn: str):
    try:
        return personalize.get_solution_status(arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to get status", e)


@router.post("/personalize/campaign", response_model=schemas.ArnResponse)
def create_campaign(data: schemas.CampaignRequest):
    try:
        arn = personalize.create_campaign(data.solution_version_arn, data.name, data.min_provisioned_tps)
    except AWS_ERRORS as e:
        raise _service_error("Failed to create campaign", e)
    return schemas.ArnResponse(arn=arn, message="Campaign created")


@router.get("/personalize/campaign/{arn:path}/status")
def get_campaign_status(arn: str):
    try:
        return personalize.get_campaign_status(arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to get status", e)


@router.post("/personalize/workflow")
def setup_workflow(data: schemas.WorkflowRequest):
    """Dataset group + schema + dataset + import in one call."""
    if not get_ai_settings().s3_bucket:
        raise _s3_not_configured("Personalize requires S3. Please configure S3_BUCKET_NAME in .env")
    try:
        return personalize.setup_complete_workflow(data.dataset_group_name, data.interaction_data)
    except personalize.StorageNotConfiguredError as e:
        raise _s3_not_configured(str(e))
    except (personalize.S3UploadError, RuntimeError, *AWS_ERRORS) as e:
        raise _service_error("Failed to set up workflow", e)


# ============== SAGEMAKER ==============

@router.post("/sagemaker/pipeline", response_model=schemas.PipelineResponse)
def create_pipeline(data: schemas.CreatePipelineRequest):
    settings = get_ai_settings()
    if not settings.sagemaker_role_arn:
        raise HTTPException(
            status_code=400,
            detail="SAGEMAKER_ROLE_ARN not configured in environment variables",
        )
    if not settings.s3_bucket:
        raise _s3_not_configured(
            "SageMaker requires S3 for training data and model storage. Please configure S3_BUCKET_NAME in .env"
        )

    definition = sagemaker.create_xgboost_pipeline_definition(
        pipeline_name=data.pipeline_name,
        role_arn=settings.sagemaker_role_arn,
        input_data_path=str(data.input_data_path),
        output_model_path=str(data.output_model_path),
        instance_type=data.instance_type,
        training_image=settings.training_image,
    )
    try:
        arn = sagemaker.create_pipeline(data.pipeline_name, definition, settings.sagemaker_role_arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to create pipeline", e)
    return schemas.PipelineResponse(pipeline_arn=arn, message="Pipeline created successfully")


@router.post("/sagemaker/pipeline/start", response_model=schemas.ExecutionResponse)
def start_pipeline(data: schemas.StartPipelineRequest):
    try:
        arn = sagemaker.start_pipeline_execution(data.pipeline_name, data.parameters)
    except AWS_ERRORS as e:
        raise _service_error("Failed to start pipeline", e)
    return schemas.ExecutionResponse(execution_arn=arn, message="Pipeline execution started")


@router.get("/sagemaker/pipeline/{name}")
def get_pipeline(name: str):
    try:
        return sagemaker.describe_pipeline(name)
    except AWS_ERRORS as e:
        raise _service_error("Failed to get pipeline", e)


@router.get("/sagemaker/pipeline/{name}/executions")
def list_executions(name: str):
    try:
        return sagemaker.list_pipeline_executions(name)
    except AWS_ERRORS as e:
        raise _service_error("Failed to list executions", e)


@router.get("/sagemaker/execution/{arn:path}")
def get_execution(arn: str):
    try:
        return sagemaker.get_pipeline_execution_status(arn)
    except AWS_ERRORS as e:
        raise _service_error("Failed to get execution status", e)
