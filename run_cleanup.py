from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from retention_cleaner import (
    DEFAULT_LOG_FILE,
    ConfigError,
    FolderCleanerService,
    append_run_summary,
    resolve_config,
)

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cleanup",
        usage="%(prog)s [days|config.yml] [folder1 folder2 ...]",
        description=(
            "Delete files older than the newest file in each folder minus the "
            "retention window. Missing values fall back to the DAYS and FOLDERS "
            "environment variables."
        ),
    )
    parser.add_argument(
        "targets",
        nargs="*",
        metavar="days|config-file folder",
        help="Retention days or a YAML config file, followed by folders to clean.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=DEFAULT_LOG_FILE,
        help="File the run summary is appended to (default: cleanup.log).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = resolve_config(args.targets)
    except ConfigError as exc:
        parser.error(str(exc))

    logger.debug("Cleaning %d folders with a %d day window", len(cfg.folders), cfg.days)
    service = FolderCleanerService()
    summary = service.run(cfg.folders, cfg.days)
    print(f"Found {summary.files_seen} files, removed {summary.files_deleted}.")

    try:
        append_run_summary(args.log_file, summary)
    except OSError as exc:
        logger.warning("Failed to write run log %s: %s", args.log_file, exc)
    else:
        logger.info("Run results written to %s", args.log_file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
