# FILE: roadmapx/ai/sagemaker.py
"""
Amazon SageMaker Pipelines operations.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from roadmapx.aws import sagemaker_client, error_code
from roadmapx.config import DEFAULT_TRAINING_IMAGE

logger = logging.getLogger(__name__)

DEFAULT_INSTANCE_TYPE = "ml.m5.xlarge"
PIPELINE_SCHEMA_VERSION = "2020-12-01"
MAX_EXECUTIONS_LISTED = 10


def _strip(response: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in response.items() if k != "ResponseMetadata"}


def create_pipeline(
    pipeline_name: str,
    pipeline_definition: str,
    role_arn: str,
    tags: Optional[List[Dict[str, str]]] = None,
) -> str:
    """Create a pipeline. If one with that name exists its ARN is returned unchanged."""
    client = sagemaker_client()
    try:
        existing = client.describe_pipeline(PipelineName=pipeline_name)
        logger.info("[sagemaker] Pipeline %s already exists", pipeline_name)
        return existing.get("PipelineArn", "")
    except ClientError as e:
        if error_code(e) != "ResourceNotFound":
            raise

    kwargs = {
        "PipelineName": pipeline_name,
        "PipelineDefinition": pipeline_definition,
        "RoleArn": role_arn,
    }
    if tags:
        kwargs["Tags"] = tags
    try:
        response = client.create_pipeline(**kwargs)
    except ClientError:
        logger.exception("[sagemaker] Error creating pipeline %s", pipeline_name)
        raise
    logger.info("[sagemaker] Created pipeline: %s", response.get("PipelineArn"))
    return response.get("PipelineArn", "")


def describe_pipeline(pipeline_name: str) -> Dict[str, Any]:
    return _strip(sagemaker_client().describe_pipeline(PipelineName=pipeline_name))


def start_pipeline_execution(pipeline_name: str, parameters: Optional[Dict[str, str]] = None) -> str:
    """Start an execution. parameters maps pipeline parameter names to values."""
    kwargs: Dict[str, Any] = {"PipelineName": pipeline_name}
    if parameters:
        kwargs["PipelineParameters"] = [{"Name": k, "Value": v} for k, v in parameters.items()]
    response = sagemaker_client().start_pipeline_execution(**kwargs)
    return response.get("PipelineExecutionArn", "")


def get_pipeline_execution_status(pipeline_execution_arn: str) -> Dict[str, Any]:
    return _strip(
        sagemaker_client().describe_pipeline_execution(PipelineExecutionArn=pipeline_execution_arn)
    )


def list_pipeline_executions(pipeline_name: str) -> Dict[str, Any]:
    return _strip(
        sagemaker_client().list_pipeline_executions(PipelineName=pipeline_name, MaxResults=MAX_EXECUTIONS_LISTED)
    )


def create_xgboost_pipeline_definition(
    pipeline_name: str,
    role_arn: str,
    input_data_path: str,
    output_model_path: str,
    instance_type: str = DEFAULT_INSTANCE_TYPE,
    training_image: Optional[str] = None,
) -> str:
    """
    Build a single-step XGBoost training pipeline definition (JSON string).

    Instance type, input and output locations are pipeline parameters so an
    execution can override them.
    """
    definition = {
        "Version": PIPELINE_SCHEMA_VERSION,
        "Metadata": {},
        "Parameters": [
            {"Name": "TrainingInstanceType", "Type": "String", "DefaultValue": instance_type or DEFAULT_INSTANCE_TYPE},
            {"Name": "InputDataPath", "Type": "String", "DefaultValue": input_data_path},
            {"Name": "OutputModelPath", "Type": "String", "DefaultValue": output_model_path},
        ],
        "PipelineExperimentConfig": {
            "ExperimentName": f"{pipeline_name}-experiment",
        },
        "Steps": [
            {
                "Name": "TrainingStep",
                "Type": "Training",
                "Arguments": {
                    "AlgorithmSpecification": {
                        "TrainingImage": training_image or DEFAULT_TRAINING_IMAGE,
                        "TrainingInputMode": "File",
                    },
                    "InputDataConfig": [
                        {
                            "ChannelName": "training",
                            "DataSource": {
                                "S3DataSource": {
                                    "S3DataType": "S3Prefix",
                                    "S3Uri": {"Get": "Parameters.InputDataPath"},
                                },
                            },
                        },
                    ],
                    "OutputDataConfig": {
                        "S3OutputPath": {"Get": "Parameters.OutputModelPath"},
                    },
                    "ResourceConfig": {
                        "InstanceType": {"Get": "Parameters.TrainingInstanceType"},
                        "InstanceCount": 1,
                        "VolumeSizeInGB": 30,
                    },
                    "RoleArn": role_arn,
                    "StoppingCondition": {
                        "MaxRuntimeInSeconds": 86400,
                    },
                },
            },
        ],
    }
    return json.dumps(definition)
