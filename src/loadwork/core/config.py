"""Step configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from loadwork.core.exceptions import RequiredValueError
from loadwork.models.record import Depend

ENV_PREFIX = "LW_"
DEPENDS_PREFIX = f"{ENV_PREFIX}DEPENDS_"


class S3Config(BaseSettings):
    """Artifact bucket configuration."""

    model_config = {"env_prefix": "LW_S3_"}

    bucket: str = "loadwork-artifacts"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # MinIO / LocalStack override
    access_key: str | None = None
    secret_key: str | None = None
    path_style: bool = True


class DynamoDBConfig(BaseSettings):
    """Workflow record table configuration."""

    model_config = {"env_prefix": "LW_DYNAMO_"}

    table: str = "loadwork-workflows"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis workflow record configuration."""

    model_config = {"env_prefix": "LW_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    key_prefix: str = "workflow"


class StepSettings(BaseSettings):
    """Root settings for one step execution."""

    model_config = {"env_prefix": ENV_PREFIX}

    target_id: str
    work_name: str
    work_version: str
    indir: str
    outdir: str

    log_level: str = "INFO"
    record_backend: Literal["dynamodb", "redis"] = "dynamodb"
    max_concurrent_transfers: int = Field(default=16, ge=1)
    depends: list[Depend] = Field(default_factory=list)

    s3: S3Config = Field(default_factory=S3Config)
    dynamodb: DynamoDBConfig = Field(default_factory=DynamoDBConfig)
    redis: RedisConfig = Field(default_factory=RedisConfig)


def parse_depends(environ: Mapping[str, str]) -> list[Depend]:
    """Parse ``LW_DEPENDS_<work_name>_<work_version>`` variables.

    The value lists the needed artifacts separated by ``;``. The work name is
    split from the version at the first ``_``.

    >>> parse_depends({"LW_DEPENDS_demucs_3": "bass.wav;vocal.wav"})
    [Depend(work_name='demucs', work_version='3', artifacts=['bass.wav', 'vocal.wav'])]
    """
    depends: list[Depend] = []
    for key in sorted(environ):
        value = environ[key]
        if not value or not key.startswith(DEPENDS_PREFIX):
            continue
        work_name, _, work_version = key[len(DEPENDS_PREFIX):].partition("_")
        if not work_name:
            continue
        artifacts = [a for a in value.split(";") if a]
        depends.append(
            Depend(work_name=work_name, work_version=work_version, artifacts=artifacts)
        )
    return depends


def load_settings() -> StepSettings:
    """Build the StepSettings once at process start.

    Missing required values surface as RequiredValueError naming the
    environment variable.
    """
    try:
        return StepSettings(depends=parse_depends(os.environ))
    except ValidationError as exc:
        for err in exc.errors():
            if err["type"] == "missing" and err["loc"]:
                raise RequiredValueError(f"{ENV_PREFIX}{str(err['loc'][0]).upper()}") from exc
        raise
