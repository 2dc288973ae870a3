"""Integration tests for the AWS backends against LocalStack."""

from __future__ import annotations

import asyncio

import pytest

from loadwork.models.record import Depend, WorkRecord
from loadwork.persistence.dynamodb_backend import DynamoDBWorkflowStore
from loadwork.persistence.s3_backend import S3ObjectStore
from loadwork.step.artifacts import ArtifactTransfer
from tests.integration.conftest import LOCALSTACK_URL, skip_no_localstack


@skip_no_localstack
class TestLocalStackIntegration:
    @pytest.fixture
    def workflow_store(self, localstack_resources):
        table, _ = localstack_resources
        return DynamoDBWorkflowStore(table=table, region="us-east-1", endpoint_url=LOCALSTACK_URL)

    @pytest.fixture
    def object_store(self, localstack_resources):
        _, bucket = localstack_resources
        return S3ObjectStore(bucket=bucket, region="us-east-1", endpoint_url=LOCALSTACK_URL)

    def test_concurrent_first_touch_creates_one_record(self, workflow_store, target_id):
        async def touch():
            return await asyncio.gather(
                *(asyncio.to_thread(workflow_store.get_or_default, target_id) for _ in range(8))
            )

        records = asyncio.run(touch())
        assert all(r.works == {} for r in records)

    def test_concurrent_updates_keep_every_work(self, workflow_store, target_id):
        workflow_store.get_or_default(target_id)
        names = [f"w{i}" for i in range(8)]

        async def update_all():
            await asyncio.gather(*(
                asyncio.to_thread(workflow_store.update_work_record, target_id,
                                  WorkRecord.succeeded(n, "1", [], {}))
                for n in names
            ))

        asyncio.run(update_all())
        assert sorted(workflow_store.get_or_default(target_id).works) == names

    def test_artifact_round_trip(self, object_store, target_id, tmp_path):
        src, dst = tmp_path / "src", tmp_path / "dst" / "w"
        src.mkdir()
        dst.mkdir(parents=True)
        (src / "a.bin").write_bytes(bytes(range(256)))
        transfer = ArtifactTransfer(object_store)

        asyncio.run(transfer.upload(target_id, "w", src))
        depend = Depend(work_name="w", work_version="1", artifacts=["a.bin"])
        asyncio.run(transfer.download(target_id, [depend], tmp_path / "dst"))

        assert (dst / "a.bin").read_bytes() == bytes(range(256))
