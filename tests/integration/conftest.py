"""Integration test fixtures — LocalStack DynamoDB and S3."""

from __future__ import annotations

import os
import sys
import uuid

import boto3
import pytest

# Default LocalStack endpoint
LOCALSTACK_URL = os.environ.get("LOCALSTACK_URL", "http://localhost:4566")
TABLE = "loadwork-workflows-inttest"
BUCKET = "loadwork-artifacts-inttest"


def _localstack_available() -> bool:
    """Check if LocalStack is reachable."""
    try:
        client = boto3.client("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL)
        client.list_tables()
        return True
    except Exception:
        return False


skip_no_localstack = pytest.mark.skipif(
    not _localstack_available(),
    reason="LocalStack not available",
)


@pytest.fixture(scope="session")
def localstack_resources():
    """Create the workflow table and artifact bucket via the bootstrap script."""
    sys.path.insert(0, str(os.path.join(os.path.dirname(__file__), "..", "..", "scripts")))
    from bootstrap_localstack import create_bucket, create_workflow_table

    create_workflow_table(
        boto3.resource("dynamodb", region_name="us-east-1", endpoint_url=LOCALSTACK_URL),
        table=TABLE,
    )
    create_bucket(
        boto3.client("s3", region_name="us-east-1", endpoint_url=LOCALSTACK_URL),
        bucket=BUCKET,
    )
    return TABLE, BUCKET


@pytest.fixture
def target_id() -> str:
    return f"inttest-{uuid.uuid4().hex}"
