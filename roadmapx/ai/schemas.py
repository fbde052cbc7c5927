# FILE: roadmapx/ai/schemas.py
"""
Request/response schemas for the managed AI service endpoints.
"""
from typing import Annotated, Any, Dict, List, Optional
from pydantic import AnyUrl, BaseModel, Field

from roadmapx.ai.sagemaker import DEFAULT_INSTANCE_TYPE


# ============== COMPREHEND ==============

class AnalyzeTextRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=5000)
    include_entities: bool = True
    include_key_phrases: bool = True
    include_sentiment: bool = True


class AnalyzeTextResponse(BaseModel):
    language: List[Dict[str, Any]] = []
    sentiment: Optional[Dict[str, Any]] = None
    entities: Optional[List[Dict[str, Any]]] = None
    key_phrases: Optional[List[Dict[str, Any]]] = None


class SentimentRequest(BaseModel):
    # Checked in the router: missing text is a 400 "Text is required"
    text: Optional[str] = None


class BatchSentimentRequest(BaseModel):
    texts: List[Annotated[str, Field(min_length=1, max_length=5000)]] = Field(..., min_length=1, max_length=25)
    language_code: str = "en"


# ============== PERSONALIZE ==============

class DatasetGroupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=63)


class DatasetGroupResponse(BaseModel):
    dataset_group_arn: str
    message: str


class ImportDatasetRequest(BaseModel):
    dataset_arn: Optional[str] = None
    data: Optional[str] = None
    s3_key: Optional[str] = None


class ImportDatasetResponse(BaseModel):
    import_job_arn: str
    message: str


class SolutionRequest(BaseModel):
    dataset_group_arn: str
    name: str = Field(..., min_length=1, max_length=63)
    recipe_arn: Optional[str] = None


class SolutionVersionRequest(BaseModel):
    solution_arn: str


class CampaignRequest(BaseModel):
    solution_version_arn: str
    name: str = Field(..., min_length=1, max_length=63)
    min_provisioned_tps: int = Field(1, ge=1)


class WorkflowRequest(BaseModel):
    dataset_group_name: str = Field(..., min_length=1, max_length=63)
    interaction_data: str = Field(..., min_length=1)


class ArnResponse(BaseModel):
    arn: str
    message: str


# ============== SAGEMAKER ==============

class CreatePipelineRequest(BaseModel):
    pipeline_name: str = Field(..., min_length=1, max_length=63)
    instance_type: str = DEFAULT_INSTANCE_TYPE
    input_data_path: AnyUrl
    output_model_path: AnyUrl


class PipelineResponse(BaseModel):
    pipeline_arn: str
    message: str


class StartPipelineRequest(BaseModel):
    pipeline_name: str = Field(..., min_length=1)
    parameters: Optional[Dict[str, str]] = None


class ExecutionResponse(BaseModel):
    execution_arn: str
    message: str
