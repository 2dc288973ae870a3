"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from loadwork.core.config import StepSettings
from loadwork.core.protocols import IObjectStore, IWorkflowStore
from loadwork.persistence.dynamodb_backend import DynamoDBWorkflowStore
from loadwork.persistence.redis_backend import RedisWorkflowStore
from loadwork.persistence.s3_backend import S3ObjectStore


def create_persistence(settings: StepSettings) -> tuple[IWorkflowStore, IObjectStore]:
    """Create wired-up persistence backends from step settings.

    Returns:
        Tuple of (workflow_store, object_store).
    """
    workflow_store: IWorkflowStore
    if settings.record_backend == "redis":
        workflow_store = RedisWorkflowStore(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
            key_prefix=settings.redis.key_prefix,
        )
    else:
        workflow_store = DynamoDBWorkflowStore(
            table=settings.dynamodb.table,
            region=settings.dynamodb.region,
            endpoint_url=settings.dynamodb.endpoint_url,
        )

    object_store = S3ObjectStore(
        bucket=settings.s3.bucket,
        region=settings.s3.region,
        endpoint_url=settings.s3.endpoint_url,
        access_key=settings.s3.access_key,
        secret_key=settings.s3.secret_key,
        path_style=settings.s3.path_style,
    )

    return workflow_store, object_store
