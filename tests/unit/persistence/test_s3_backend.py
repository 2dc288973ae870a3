"""Unit tests for S3ObjectStore using moto."""

from __future__ import annotations

import io

import boto3
import pytest
from boto3.exceptions import RetriesExceededError as Boto3RetriesExceededError
from moto import mock_aws
from s3transfer.exceptions import RetriesExceededError

from loadwork.core.exceptions import ObjectStoreError
from loadwork.persistence.s3_backend import S3ObjectStore

BUCKET = "test-artifacts"


@pytest.fixture
def s3_backend():
    with mock_aws():
        client = boto3.client("s3", region_name="us-east-1")
        client.create_bucket(Bucket=BUCKET)
        yield S3ObjectStore(bucket=BUCKET, region="us-east-1")


class TestWrite:
    def test_write_returns_key(self, s3_backend):
        assert s3_backend.write("39/w/file.txt", b"a,b,c") == "39/w/file.txt"

    def test_write_stores_bytes(self, s3_backend):
        s3_backend.write("39/w/data.bin", b"\x00\x01\x02")
        assert s3_backend.read("39/w/data.bin") == b"\x00\x01\x02"


class TestRead:
    def test_read_missing_key_raises(self, s3_backend):
        with pytest.raises(ObjectStoreError) as exc_info:
            s3_backend.read("does/not/exist.txt")
        assert exc_info.value.key == "does/not/exist.txt"


class TestFileObjects:
    def test_upload_then_download(self, s3_backend):
        s3_backend.upload_fileobj(io.BytesIO(b"mikumiku"), "39/w/up.txt")
        buf = io.BytesIO()
        s3_backend.download_fileobj("39/w/up.txt", buf)
        assert buf.getvalue() == b"mikumiku"

    def test_download_missing_key_raises(self, s3_backend):
        with pytest.raises(ObjectStoreError):
            s3_backend.download_fileobj("39/w/missing.txt", io.BytesIO())


def test_missing_bucket_raises():
    with mock_aws():
        store = S3ObjectStore(bucket="no-such-bucket", region="us-east-1")
        with pytest.raises(ObjectStoreError):
            store.write("k", b"v")


class TestTransferRetriesExhausted:
    def test_download_gives_up_as_object_store_error(self, s3_backend, monkeypatch):
        def give_up(bucket, key, fileobj):
            raise RetriesExceededError(ConnectionResetError("reset by peer"))

        monkeypatch.setattr(s3_backend._client, "download_fileobj", give_up)
        with pytest.raises(ObjectStoreError) as exc_info:
            s3_backend.download_fileobj("39/w/a.txt", io.BytesIO())
        assert exc_info.value.key == "39/w/a.txt"

    def test_upload_gives_up_as_object_store_error(self, s3_backend, monkeypatch):
        def give_up(fileobj, bucket, key):
            raise Boto3RetriesExceededError(ConnectionResetError("reset by peer"))

        monkeypatch.setattr(s3_backend._client, "upload_fileobj", give_up)
        with pytest.raises(ObjectStoreError):
            s3_backend.upload_fileobj(io.BytesIO(b"x"), "39/w/a.txt")
