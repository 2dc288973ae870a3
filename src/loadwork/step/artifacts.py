"""Concurrent artifact transfer between the workspace and the object store.

Every object lives under ``<target_id>/<work_name>/<filename>``. Transfers
fan out as asyncio tasks; the blocking object store calls run in worker
threads. The first failing transfer fails the whole operation, and the
remaining ones are left to finish on their own with their results ignored.
Nothing already written is rolled back.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from loadwork.core.exceptions import ObjectStoreError, StepError
from loadwork.core.protocols import IObjectStore
from loadwork.models.record import Depend

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 16


def artifact_key(target_id: str, work_name: str, filename: str) -> str:
    return f"{target_id}/{work_name}/{filename}"


class ArtifactTransfer:
    """Fan-out download/upload of one step's artifacts."""

    def __init__(self, store: IObjectStore, max_concurrent: int = DEFAULT_MAX_CONCURRENT) -> None:
        self._store = store
        self._max_concurrent = max_concurrent

    async def download(self, target_id: str, depends: list[Depend], outdir: str | Path) -> None:
        """Fetch every declared artifact into ``<outdir>/<work_name>/<artifact>``."""
        outdir = Path(outdir)
        sem = asyncio.Semaphore(self._max_concurrent)
        tasks = [
            self._download_one(sem, artifact_key(target_id, dep.work_name, artifact),
                               outdir / dep.work_name / artifact)
            for dep in depends
            for artifact in dep.artifacts
        ]
        await asyncio.gather(*tasks)

    async def _download_one(self, sem: asyncio.Semaphore, key: str, path: Path) -> None:
        async with sem:
            await asyncio.to_thread(self._fetch, key, path)

    def _fetch(self, key: str, path: Path) -> None:
        try:
            outfile = open(path, "wb")
        except OSError as exc:
            raise StepError(f"fail to create file: {path}: {exc}", retryable=True) from exc
        with outfile:
            try:
                self._store.download_fileobj(key, outfile)
                outfile.flush()
                os.fsync(outfile.fileno())
            except ObjectStoreError as exc:
                raise StepError(f"fail to download {key} to {path}", retryable=True) from exc
            except OSError as exc:
                raise StepError(f"fail to write file: {path}: {exc}", retryable=True) from exc
        logger.debug("download: %s to %s", key, path)

    async def upload(self, target_id: str, work_name: str, directory: str | Path) -> list[str]:
        """Upload every regular file directly under ``directory``; return their filenames."""
        directory = Path(directory)
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            raise StepError(f"fail to read directory: {directory}: {exc}", retryable=True) from exc
        for entry in entries:
            if not entry.is_file():
                raise StepError(f"invalid output: {entry.name}")

        sem = asyncio.Semaphore(self._max_concurrent)
        tasks = [
            self._upload_one(sem, entry, artifact_key(target_id, work_name, entry.name))
            for entry in entries
        ]
        return list(await asyncio.gather(*tasks))

    async def _upload_one(self, sem: asyncio.Semaphore, path: Path, key: str) -> str:
        async with sem:
            return await asyncio.to_thread(self._put, path, key)

    def _put(self, path: Path, key: str) -> str:
        try:
            infile = open(path, "rb")
        except OSError as exc:
            raise StepError(f"fail to open file: {path}: {exc}", retryable=True) from exc
        with infile:
            try:
                self._store.upload_fileobj(infile, key)
            except ObjectStoreError as exc:
                raise StepError(f"fail to upload {path} to {key}", retryable=True) from exc
            except OSError as exc:
                raise StepError(f"fail to read file: {path}: {exc}", retryable=True) from exc
        logger.debug("upload: %s to %s", path, key)
        return path.name
