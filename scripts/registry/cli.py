"""Command-line interface for the registry builder."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

from scripts.registry.config import (
    load_config,
    RegistryConfig,
    DEFAULT_CONFIG_PATH,
)
from scripts.registry.errors import (
    ConfigError,
    RegistryError,
    ScanError,
)
from scripts.registry.merger import build_registry, BuildSummary


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    SCAN_ERROR = 2
    CATALOG_ERROR = 3


def _get_config(config_path: Optional[str], root: Path) -> RegistryConfig:
    """Load config from an explicit path, else registry.yaml in root, else defaults."""
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError("Config file not found", file=str(path))
        return load_config(path)
    return load_config(root / DEFAULT_CONFIG_PATH)


def _exit_code_for(error: RegistryError) -> ExitCode:
    if isinstance(error, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(error, ScanError):
        return ExitCode.SCAN_ERROR
    return ExitCode.CATALOG_ERROR


def print_summary(summary: BuildSummary) -> None:
    """Print the end-of-build report."""
    print("\nRegistry build complete!")
    print(f"  Files processed: {summary.files_processed}")
    print(f"  Total items: {summary.total_items}")
    print(f"  New items added: {summary.items_added}")
    print(f"  Items skipped: {summary.items_skipped}")
    if summary.files_failed:
        print(f"  Files failed: {summary.files_failed}")
    print(f"  Files in registry: {summary.registry_files}")

    print("\nRegistry breakdown:")
    for item_type, count in summary.by_type.items():
        print(f"  {item_type}: {count} items")


def cmd_build(args: argparse.Namespace) -> int:
    """Run one full registry build."""
    root = Path(args.root).absolute() if args.root else Path.cwd()

    try:
        config = _get_config(args.config, root)
        print("Building registry...")
        summary = build_registry(root, config)
    except RegistryError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return _exit_code_for(e)

    print_summary(summary)
    return ExitCode.SUCCESS


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="registry-build",
        description="Publish new source files into the component registry",
    )
    parser.add_argument(
        "--config",
        "-c",
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH} in the project root)",
    )
    parser.add_argument(
        "--root",
        help="Project root containing the source tree and catalog (default: cwd)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log debug details to stderr",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    return cmd_build(args)


if __name__ == "__main__":
    sys.exit(main())
