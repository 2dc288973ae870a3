"""S3 object storage backend implementing IObjectStore."""

from __future__ import annotations

import logging
from typing import BinaryIO

import boto3
from boto3.exceptions import RetriesExceededError as Boto3RetriesExceededError
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from s3transfer.exceptions import RetriesExceededError

from loadwork.core.exceptions import ObjectStoreError

logger = logging.getLogger(__name__)

# The managed transfer gives up with its own error once socket retries run out.
_TRANSFER_ERRORS = (ClientError, BotoCoreError, Boto3RetriesExceededError, RetriesExceededError)


class S3ObjectStore:
    """Production IObjectStore backed by an S3-compatible bucket."""

    def __init__(self, bucket: str, region: str = "us-east-1",
                 endpoint_url: str | None = None, access_key: str | None = None,
                 secret_key: str | None = None, path_style: bool = True) -> None:
        self._bucket = bucket
        kwargs: dict = {
            "region_name": region,
            "config": Config(s3={"addressing_style": "path" if path_style else "virtual"}),
        }
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        if access_key and secret_key:
            kwargs["aws_access_key_id"] = access_key
            kwargs["aws_secret_access_key"] = secret_key
        self._client = boto3.client("s3", **kwargs)

    def read(self, key: str) -> bytes:
        try:
            resp = self._client.get_object(Bucket=self._bucket, Key=key)
            return resp["Body"].read()
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(key, f"S3 read failed for {key!r}: {exc}") from exc

    def write(self, key: str, data: bytes) -> str:
        try:
            self._client.put_object(Bucket=self._bucket, Key=key, Body=data)
            return key
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreError(key, f"S3 write failed for {key!r}: {exc}") from exc

    def download_fileobj(self, key: str, fileobj: BinaryIO) -> None:
        try:
            self._client.download_fileobj(self._bucket, key, fileobj)
        except _TRANSFER_ERRORS as exc:
            raise ObjectStoreError(key, f"S3 download failed for {key!r}: {exc}") from exc
        logger.debug("downloaded s3://%s/%s", self._bucket, key)

    def upload_fileobj(self, fileobj: BinaryIO, key: str) -> str:
        try:
            self._client.upload_fileobj(fileobj, self._bucket, key)
        except _TRANSFER_ERRORS as exc:
            raise ObjectStoreError(key, f"S3 upload failed for {key!r}: {exc}") from exc
        logger.debug("uploaded s3://%s/%s", self._bucket, key)
        return key
