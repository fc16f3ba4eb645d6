"""Operator commands for maintaining the media bucket and its index."""

import argparse
import asyncio
import logging
from collections.abc import Sequence

from memory_calendar.app_logging import configure_logging
from memory_calendar.containers import AppContainer, build_container
from memory_calendar.services.date_index import IndexUnavailableError

logger = logging.getLogger("memory_calendar.cli")

_PREVIEW_LIMIT = 30


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the operator CLI."""
    parser = argparse.ArgumentParser(
        prog="memory-calendar",
        description="Maintain the memory calendar media bucket",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log extraction details"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    build = commands.add_parser(
        "build-index", help="Rebuild the date-media index from processed media"
    )
    build.add_argument(
        "--dry-run", action="store_true", help="Compute without uploading"
    )

    prune = commands.add_parser(
        "prune-index", help="Drop index entries whose objects no longer exist"
    )
    prune.add_argument(
        "--dry-run", action="store_true", help="Compute without uploading"
    )

    live = commands.add_parser(
        "delete-live-photos",
        help="Delete .mp4/.mov companions of .jpg/.jpeg live photos",
    )
    live.add_argument("--dry-run", action="store_true", help="List without deleting")
    live.add_argument(
        "--prefix", default=None, help="Key prefix to scan (default: S3_SOURCE_PREFIX)"
    )
    return parser


async def _run(args: argparse.Namespace, container: AppContainer) -> int:
    if args.command == "build-index":
        report = await container.date_index_service.build_index(dry_run=args.dry_run)
        if report.objects_found == 0:
            logger.info("Nothing to do.")
        elif not report.uploaded:
            logger.info("Dry run: not uploading index.")
        return 0

    if args.command == "prune-index":
        try:
            prune_report = await container.date_index_service.prune_index(
                dry_run=args.dry_run
            )
        except IndexUnavailableError as exc:
            logger.error("%s. Run build-index first.", exc)
            return 1
        if prune_report.removed == 0 and prune_report.dates_removed == 0:
            logger.info("No changes needed - all files exist.")
        elif not prune_report.uploaded:
            logger.info("Dry run: not uploading cleaned index.")
        return 0

    prefix = (
        args.prefix if args.prefix is not None else container.settings.s3_source_prefix
    )
    cleanup = await container.live_photo_cleaner.clean(
        prefix=prefix, dry_run=args.dry_run
    )
    if args.dry_run:
        logger.info("Would delete:" if cleanup.candidates else "Nothing to delete.")
        for key in cleanup.candidates[:_PREVIEW_LIMIT]:
            logger.info("  %s", key)
        remaining = len(cleanup.candidates) - _PREVIEW_LIMIT
        if remaining > 0:
            logger.info("  ... and %d more.", remaining)
    else:
        logger.info("Deleted %d live-photo video companion(s).", cleanup.deleted)
    return 1 if cleanup.errors else 0


def main(
    argv: Sequence[str] | None = None, container: AppContainer | None = None
) -> int:
    """Run an operator command and return its exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    resolved = container or build_container()
    if not resolved.settings.s3_bucket_name:
        logger.error("Set S3_BUCKET_NAME in the environment (e.g. from .env).")
        return 1
    try:
        return asyncio.run(_run(args, resolved))
    finally:
        asyncio.run(resolved.close_resources())


if __name__ == "__main__":
    raise SystemExit(main())
