# FILE: roadmapx/ai/personalize.py
"""
Amazon Personalize operations.

Covers the recommendation workflow end to end: dataset group -> dataset ->
import job (data staged in S3) -> solution -> solution version (training)
-> campaign (deployment).
"""

import json
import logging
import time
from typing import Any, Dict, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError

from roadmapx.aws import personalize_client, s3_client, error_code
from roadmapx.config import get_ai_settings

logger = logging.getLogger(__name__)

DEFAULT_RECIPE_ARN = "arn:aws:personalize:::recipe/aws-user-personalization"

# USER_ID, ITEM_ID, TIMESTAMP, EVENT_TYPE
INTERACTIONS_SCHEMA = {
    "type": "record",
    "name": "Interactions",
    "namespace": "com.amazonaws.personalize.schema",
    "fields": [
        {"name": "USER_ID", "type": "string"},
        {"name": "ITEM_ID", "type": "string"},
        {"name": "TIMESTAMP", "type": "long"},
        {"name": "EVENT_TYPE", "type": "string"},
    ],
    "version": "1.0",
}


class StorageNotConfiguredError(Exception):
    """The AI artifacts bucket is not configured."""
    pass


class S3UploadError(Exception):
    """Staging data in S3 failed."""
    pass


def _strip(response: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in response.items() if k != "ResponseMetadata"}


def _find_dataset_group(name: str) -> Optional[str]:
    paginator = personalize_client().get_paginator("list_dataset_groups")
    for page in paginator.paginate():
        for group in page.get("datasetGroups", []):
            if group.get("name") == name:
                return group.get("datasetGroupArn")
    return None


def create_dataset_group(name: str) -> str:
    """Create a dataset group, or return the ARN of an existing one with that name."""
    existing = _find_dataset_group(name)
    if existing:
        logger.info("[personalize] Dataset group %s already exists: %s", name, existing)
        return existing

    try:
        response = personalize_client().create_dataset_group(name=name)
    except ClientError as e:
        if error_code(e) == "ResourceAlreadyExistsException":
            existing = _find_dataset_group(name)
            if existing:
                return existing
        raise
    logger.info("[personalize] Created dataset group: %s", response["datasetGroupArn"])
    return response["datasetGroupArn"]


def create_dataset(dataset_group_arn: str, name: str, schema_arn: str, dataset_type: str) -> str:
    """dataset_type: Interactions | Users | Items"""
    response = personalize_client().create_dataset(
        name=name,
        datasetGroupArn=dataset_group_arn,
        datasetType=dataset_type,
        schemaArn=schema_arn,
    )
    return response["datasetArn"]


def import_dataset(dataset_arn: str, data: Union[str, bytes], s3_key: str) -> str:
    """
    Upload data to the artifacts bucket and start an import job from it.

    Raises:
        StorageNotConfiguredError: no bucket configured
        S3UploadError: upload failed
    """
    settings = get_ai_settings()
    if not settings.s3_bucket:
        raise StorageNotConfiguredError(
            "S3 bucket not configured. Please set S3_BUCKET_NAME or AI_ARTIFACTS_BUCKET in .env"
        )

    try:
        s3_client().put_object(Bucket=settings.s3_bucket, Key=s3_key, Body=data)
    except (BotoCoreError, ClientError) as e:
        raise S3UploadError(f"S3 upload failed: {e}. Please ensure S3 is configured correctly.") from e

    response = personalize_client().create_dataset_import_job(
        jobName=f"import-{int(time.time() * 1000)}",
        datasetArn=dataset_arn,
        dataSource={"dataLocation": f"s3://{settings.s3_bucket}/{s3_key}"},
        roleArn=settings.personalize_role_arn,
    )
    return response["datasetImportJobArn"]


def create_solution(dataset_group_arn: str, name: str, recipe_arn: Optional[str] = None) -> str:
    response = personalize_client().create_solution(
        name=name,
        datasetGroupArn=dataset_group_arn,
        recipeArn=recipe_arn or DEFAULT_RECIPE_ARN,
    )
    return response["solutionArn"]


def create_solution_version(solution_arn: str) -> str:
    """Start training. Returns the solution version ARN."""
    response = personalize_client().create_solution_version(solutionArn=solution_arn)
    return response["solutionVersionArn"]


def create_campaign(solution_version_arn: str, name: str, min_provisioned_tps: int = 1) -> str:
    response = personalize_client().create_campaign(
        name=name,
        solutionVersionArn=solution_version_arn,
        minProvisionedTPS=min_provisioned_tps,
    )
    return response["campaignArn"]


def get_dataset_group_status(dataset_group_arn: str) -> Dict[str, Any]:
    return _strip(personalize_client().describe_dataset_group(datasetGroupArn=dataset_group_arn))


def get_campaign_status(campaign_arn: str) -> Dict[str, Any]:
    return _strip(personalize_client().describe_campaign(campaignArn=campaign_arn))


def get_solution_status(solution_arn: str) -> Dict[str, Any]:
    return _strip(personalize_client().describe_solution(solutionArn=solution_arn))


def create_interactions_schema(name: str) -> str:
    """Register the interactions schema; returns its ARN (existing one reused)."""
    try:
        response = personalize_client().create_schema(name=name, schema=json.dumps(INTERACTIONS_SCHEMA))
        return response["schemaArn"]
    except ClientError as e:
        if error_code(e) != "ResourceAlreadyExistsException":
            raise
    paginator = personalize_client().get_paginator("list_schemas")
    for page in paginator.paginate():
        for schema in page.get("schemas", []):
            if schema.get("name") == name:
                return schema["schemaArn"]
    raise RuntimeError(f"Schema {name} reported as existing but not found")


def setup_complete_workflow(dataset_group_name: str, interaction_data: Union[str, bytes]) -> Dict[str, Any]:
    """
    Create dataset group, interactions schema and dataset, then import data.

    Training (solution version) and deployment (campaign) must wait for the
    import job to finish, so they are listed as next steps.
    """
    dataset_group_arn = create_dataset_group(dataset_group_name)
    schema_arn = create_interactions_schema(f"{dataset_group_name}-interactions")
    dataset_arn = create_dataset(dataset_group_arn, f"{dataset_group_name}-interactions", schema_arn, "Interactions")

    s3_key = f"personalize/{dataset_group_name}/interactions/{int(time.time() * 1000)}.csv"
    import_job_arn = import_dataset(dataset_arn, interaction_data, s3_key)

    return {
        "dataset_group_arn": dataset_group_arn,
        "dataset_arn": dataset_arn,
        "import_job_arn": import_job_arn,
        "s3_key": s3_key,
        "next_steps": [
            "Wait for import job to complete",
            "Create solution version",
            "Create campaign",
        ],
    }
