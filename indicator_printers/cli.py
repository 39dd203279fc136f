"""Command-line interface for indicator-printers."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .config import load_config
from .core import MenuModelBuilder, StateReconciler
from .i18n import configure_translations

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Printer status indicator service",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("start", help="Run the indicator service")
    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )
    subparsers.add_parser(
        "status", help="Scan the spooler once and print the printers menu"
    )

    return parser


def print_status(config_server: Optional[str]) -> int:
    from .adapters import CupsSpooler

    reconciler = StateReconciler(CupsSpooler(server=config_server))
    builder = MenuModelBuilder(reconciler)
    section, any_visible = builder.rebuild_printers_section()

    records = reconciler.records()
    if not records:
        print("No printers found")
        return 0

    for record in records:
        item = section.find(record.name)
        secondary = ""
        if item is not None and item.secondary_text is not None:
            secondary = item.secondary_text
        elif item is not None and item.secondary_count is not None:
            secondary = str(item.secondary_count)
        reasons = " ".join(sorted(record.reasons)) or "none"
        print(
            f"{record.name}: state={record.state.value} jobs={record.job_count} "
            f"reasons={reasons} shown={'yes' if item else 'no'} {secondary}".rstrip()
        )

    header = builder.rebuild_header(any_visible)
    print(f"\nIndicator icon: {header.icon or '(hidden)'}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_translations()

    if args.command == "start":
        from .app import IndicatorPrintersApp

        return IndicatorPrintersApp.start(config)

    if args.command == "status":
        return print_status(config.cups.server)

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
