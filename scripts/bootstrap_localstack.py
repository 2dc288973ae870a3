"""Create the workflow table and artifact bucket for local development.

Usage:
    python scripts/bootstrap_localstack.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3
from botocore.exceptions import ClientError

DEFAULT_TABLE = "loadwork-workflows"
DEFAULT_BUCKET = "loadwork-artifacts"


def create_workflow_table(ddb: Any, table: str = DEFAULT_TABLE) -> bool:
    """Create the workflow record table (hash key ``id``). Skips if it already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])
    if table in existing:
        print(f"  Table {table} already exists, skipping")
        return False
    client.create_table(
        TableName=table,
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
    print(f"  Created table {table}")
    return True


def create_bucket(s3: Any, bucket: str = DEFAULT_BUCKET, region: str = "us-east-1") -> bool:
    """Create the artifact bucket. Skips if it already exists."""
    try:
        s3.head_bucket(Bucket=bucket)
        print(f"  Bucket {bucket} already exists, skipping")
        return False
    except ClientError:
        pass
    kwargs: dict[str, Any] = {"Bucket": bucket}
    if region != "us-east-1":
        kwargs["CreateBucketConfiguration"] = {"LocationConstraint": region}
    s3.create_bucket(**kwargs)
    print(f"  Created bucket {bucket}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Create loadwork tables and buckets")
    parser.add_argument("--endpoint-url", default=None, help="AWS endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table", default=DEFAULT_TABLE, help="Workflow record table name")
    parser.add_argument("--bucket", default=DEFAULT_BUCKET, help="Artifact bucket name")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    print("Creating table...")
    create_workflow_table(boto3.resource("dynamodb", **kwargs), table=args.table)

    print("Creating bucket...")
    create_bucket(boto3.client("s3", **kwargs), bucket=args.bucket, region=args.region)

    print("Done!")


if __name__ == "__main__":
    main()
