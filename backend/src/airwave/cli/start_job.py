"""CLI command for starting a generation job for one record.

Runs the same start flow as the HTTP endpoints. Useful for resubmitting a
record left in "running" after a failed submission.

Usage:
    python -m airwave.cli.start_job {recreator,poses} RECORD_ID [-v]

Examples:
    # Resubmit a Pinterest Recreator record
    python -m airwave.cli.start_job recreator rec123

    # Verbose logging
    python -m airwave.cli.start_job poses rec456 -v
"""

import asyncio
import json
import sys
from argparse import ArgumentParser, Namespace
from typing import Optional, Sequence

import structlog

from airwave.app import build_generation_service
from airwave.core.config import Settings, configure_logging, warn_missing_config
from airwave.services.exceptions import BadRequest, ServiceError

logger = structlog.get_logger()


def parse_args(argv: Optional[Sequence[str]] = None) -> Namespace:
    """Parse command-line arguments."""
    parser = ArgumentParser(description="Start a Wavespeed generation job for an Airtable record")

    parser.add_argument("flow", choices=["recreator", "poses"], help="Which table the record is in")
    parser.add_argument("record_id", help="Airtable record id (e.g., rec123)")

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser.parse_args(argv)


async def async_main(
    argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None
) -> int:
    """Main CLI entry point (async).

    Returns:
        Exit code: 0 (job submitted), 1 (remote failure), 2 (bad request)
    """
    args = parse_args(argv)

    settings = settings or Settings()  # type: ignore[call-arg]
    if args.verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})

    configure_logging(settings)
    warn_missing_config(settings)

    service = build_generation_service(settings)
    logger.info("cli.started", flow=args.flow, record_id=args.record_id)

    try:
        job = await service.start_job(service.flow(args.flow), args.record_id)
    except BadRequest as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except ServiceError as e:
        logger.error("cli.start_failed", error=str(e), error_type=type(e).__name__)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.error("cli.unexpected_error", error=str(e), error_type=type(e).__name__)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1

    print(json.dumps({"ok": True, "job": job}))
    return 0


def main() -> None:
    """Synchronous entry point for CLI."""
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
