"""Application entry point and CLI for used-space.

Parses the command line, loads configuration, sets up logging, runs one
scan and rollup, and prints the cumulative size of the root together with
its largest children.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import NoReturn, TextIO

from used_space.core.config import ConfigurationError, MainConfig, load_main_config
from used_space.core.errors import RootUnreadableError, UsedSpaceError, log_engine_error
from used_space.core.session import UsedSpaceSession
from used_space.utils.formatting import format_duration, format_size
from used_space.utils.logging import configure_logging, log_with_context

__all__ = ["main"]

DEFAULT_CONFIG_PATH: Path = Path("used-space.yaml")

# Exit codes
EXIT_SUCCESS = 0
EXIT_CONFIG_ERROR = 1
EXIT_RUNTIME_ERROR = 1


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    CLI Arguments:
        path: Directory to scan (default: current directory)
        --config, -c: Path to configuration file
        --log-level: Override log level from config
        --workers: Override the number of scan workers
        --top: Override the number of children listed per directory
        --depth: Override the number of directory levels expanded
        --no-syslog: Disable syslog integration
    """
    parser = argparse.ArgumentParser(
        prog="used-space",
        description="Report cumulative on-disk size per directory, largest first",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  used-space
  used-space /var/log --top 10
  used-space ~/projects --depth 2 --workers 16
  used-space --config used-space.yaml --log-level DEBUG
        """,
    )

    _ = parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help="Directory to scan (default: current directory)",
    )

    _ = parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH} when present)",
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override log level from configuration",
        metavar="LEVEL",
    )

    _ = parser.add_argument(
        "--workers",
        type=int,
        help="Number of concurrent scan workers (overrides config)",
        metavar="N",
    )

    _ = parser.add_argument(
        "--top",
        type=int,
        help="Children listed per directory (overrides config)",
        metavar="N",
    )

    _ = parser.add_argument(
        "--depth",
        type=int,
        help="Directory levels expanded below the root (overrides config)",
        metavar="N",
    )

    _ = parser.add_argument(
        "--no-syslog",
        action="store_true",
        help="Disable syslog integration",
    )

    return parser.parse_args(argv)


def load_config(config_path: Path | None) -> MainConfig:
    """Load the explicit config file, the default one when present, or defaults."""
    if config_path is not None:
        return load_main_config(config_path)
    if DEFAULT_CONFIG_PATH.exists():
        return load_main_config(DEFAULT_CONFIG_PATH)
    return MainConfig()


def apply_overrides(config: MainConfig, args: argparse.Namespace) -> MainConfig:
    """Return a copy of ``config`` with command-line overrides applied.

    Raises:
        ConfigurationError: If an override fails validation
    """
    data = config.model_dump()
    workers: int | None = args.workers  # pyright: ignore[reportAny]  # argparse boundary
    top: int | None = args.top  # pyright: ignore[reportAny]  # argparse boundary
    depth: int | None = args.depth  # pyright: ignore[reportAny]  # argparse boundary
    log_level: str | None = args.log_level  # pyright: ignore[reportAny]  # argparse boundary
    no_syslog: bool = args.no_syslog  # pyright: ignore[reportAny]  # argparse boundary

    if workers is not None:
        data["scan"]["max_workers"] = workers
    if top is not None:
        data["report"]["top"] = top
    if depth is not None:
        data["report"]["depth"] = depth
    if log_level is not None:
        data["application"]["log_level"] = log_level
    if no_syslog:
        data["application"]["syslog_enabled"] = False

    try:
        return MainConfig.model_validate(data)
    except ValueError as e:
        msg = f"Invalid command-line override:\n{e}"
        raise ConfigurationError(msg) from e


def write_report(session: UsedSpaceSession, config: MainConfig, out: TextIO) -> None:
    """Print the root total and its ranked children, ``depth`` levels deep."""
    root = session.get(session.root_path)
    total = root.size if root is not None else 0
    print(f"{format_size(total):>12}  {session.root_path}", file=out)

    def walk(dir_path: str, level: int) -> None:
        children = session.direct_children(dir_path)
        for entry in children[: config.report.top]:
            marker = "/" if entry.is_directory else ""
            name = os.path.basename(entry.path)
            print(f"{format_size(entry.size):>12}  {'  ' * level}{name}{marker}", file=out)
            if entry.is_directory and level < config.report.depth:
                walk(entry.path, level + 1)
        hidden = len(children) - config.report.top
        if hidden > 0:
            print(f"{'':>12}  {'  ' * level}... {hidden} more", file=out)

    walk(session.root_path, 1)

    stats = session.scan_stats
    if stats is not None:
        print(
            f"\n{stats.directories} directories, {stats.files} files, "
            f"{stats.skipped} skipped in {format_duration(stats.elapsed_seconds)}",
            file=out,
        )


async def async_main(*, root_path: str | None, config: MainConfig, out: TextIO | None = None) -> None:
    """Scan, wait for completion, roll up and print the report.

    Raises:
        RootUnreadableError: If the root cannot be read
    """
    logger = logging.getLogger(__name__)

    try:
        session = UsedSpaceSession(root_path, config.scan)
        _ = session.start_scan()
        rollup_stats = await session.wait_async()
    except UsedSpaceError as exc:
        log_engine_error(exc, logging.ERROR)
        raise

    log_with_context(
        logger,
        logging.INFO,
        "Scan and rollup finished",
        extra={"root_path": session.root_path, "total_bytes": rollup_stats.total_bytes},
    )
    write_report(session, config, out if out is not None else sys.stdout)


def main(argv: list[str] | None = None) -> NoReturn:
    """Main entry point for used-space.

    Exit Codes:
        0: Report printed
        1: Configuration error, unreadable root or runtime error
    """
    args = parse_arguments(argv)

    try:
        config_arg: Path | None = args.config  # pyright: ignore[reportAny]  # argparse boundary
        config = apply_overrides(load_config(config_arg), args)
    except ConfigurationError as exc:
        print(f"Configuration error:\n{exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    configure_logging(
        log_level=config.application.log_level,
        enable_syslog=config.application.syslog_enabled,
        enable_console=True,
    )

    try:
        path_arg: str | None = args.path  # pyright: ignore[reportAny]  # argparse boundary
        asyncio.run(async_main(root_path=path_arg, config=config))

    except RootUnreadableError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)

    except UsedSpaceError as exc:
        print(f"Runtime error: {exc}", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)

    except Exception as exc:
        print(f"Unexpected error: {exc}", file=sys.stderr)
        logging.exception("Unexpected error during scan")
        sys.exit(EXIT_RUNTIME_ERROR)

    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
