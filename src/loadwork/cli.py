"""loadwork command line.

Usage:
    loadwork run <program> [args...]
    loadwork scan
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from loadwork.core.config import load_settings
from loadwork.core.log_config import configure_logging
from loadwork.persistence import create_persistence
from loadwork.step.executor import StepExecutor

PROG = "loadwork"

ENVIRONMENT_HELP = """\
environment:
  LW_TARGET_ID            identity of the workflow run
  LW_WORK_NAME            name of this work
  LW_WORK_VERSION         version of this work
  LW_DEPENDS_<name>_<ver> artifacts needed from a predecessor, ';' separated
  LW_INDIR                input directory handed to the program
  LW_OUTDIR               output directory handed to the program
  LW_LOG_LEVEL            optional, default INFO
  LW_RECORD_BACKEND       "dynamodb" (default) or "redis"
  LW_MAX_CONCURRENT_TRANSFERS  optional, default 16

  LW_DYNAMO_TABLE         optional, default loadwork-workflows
  LW_DYNAMO_REGION        optional, default us-east-1
  LW_DYNAMO_ENDPOINT_URL  optional

  LW_REDIS_HOST / LW_REDIS_PORT / LW_REDIS_DB / LW_REDIS_KEY_PREFIX

  LW_S3_BUCKET            optional, default loadwork-artifacts
  LW_S3_ACCESS_KEY        optional
  LW_S3_SECRET_KEY        optional
  LW_S3_REGION            optional, default us-east-1
  LW_S3_ENDPOINT_URL      optional
  LW_S3_PATH_STYLE        "true" or "false", optional, default "true"
"""

COMMANDS_HELP = """\
commands:
  run <program> [args...]  run the program as this work and record its outcome
  scan                     reserved, does nothing
"""


def build_parser() -> argparse.ArgumentParser:
    """Parser used only to render help; the arguments are dispatched by hand
    so that every option after ``run`` reaches the program untouched."""
    return argparse.ArgumentParser(
        prog=PROG,
        usage=f"{PROG} <command> [args...]",
        description="Run one work of a workflow and record its outcome.",
        epilog=COMMANDS_HELP + "\n" + ENVIRONMENT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )


def cmd_run(program_argv: list[str]) -> int:
    settings = load_settings()
    configure_logging(settings.log_level)
    workflow_store, object_store = create_persistence(settings)
    executor = StepExecutor(
        settings=settings,
        workflow_store=workflow_store,
        object_store=object_store,
    )
    asyncio.run(executor.run(program_argv))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point.

    Help and unknown subcommands exit 0. Any failure of a run is printed and
    exits 1.
    """
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0
    if argv[0] not in ("run", "scan"):
        print(f"unknown subcommand: {argv[0]}")
        parser.print_help()
        return 0

    if argv[0] == "scan":
        return 0
    # everything after "run" belongs to the program, options included
    try:
        return cmd_run(argv[1:])
    except Exception as exc:
        print(exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
