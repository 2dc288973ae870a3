"""Run the external program and classify how it terminated."""

from __future__ import annotations

import logging
import subprocess

from loadwork.core.exceptions import StepError

logger = logging.getLogger(__name__)


def child_environment(target_id: str, indir: str, outdir: str) -> dict[str, str]:
    """The complete environment handed to the program; nothing is inherited."""
    return {
        "LW_TARGET_ID": target_id,
        "LW_INDIR": indir,
        "LW_OUTDIR": outdir,
    }


def classify_returncode(program: str, returncode: int | None) -> None:
    """Raise a StepError unless ``returncode`` means success.

    subprocess reports death by signal N as ``-N``.
    """
    if returncode is None:
        raise StepError(f"{program}: no status and signal")
    if returncode < 0:
        raise StepError(f"{program}: killed by {-returncode}")
    if returncode > 0:
        raise StepError(f"{program}: exits with {returncode}", retryable=True)


def run_program(program: str, args: list[str], target_id: str, indir: str, outdir: str) -> None:
    """Run ``program`` to completion with a cleared environment."""
    logger.info("exec %s %s", program, " ".join(args))
    try:
        completed = subprocess.run(
            [program, *args],
            env=child_environment(target_id, indir, outdir),
            check=False,
        )
    except OSError as exc:
        raise StepError(f"{program}: fail to exec: {exc}", retryable=True) from exc
    logger.info("%s finished with returncode %s", program, completed.returncode)
    classify_returncode(program, completed.returncode)
