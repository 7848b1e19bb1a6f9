#!/usr/bin/env python3
"""
Keystone CLI - project scaffolding.

Interviews you about the project you want, copies a template tree with
your answers filled in, and optionally sets up git.

Usage:
    keystone create demo              - demo project wired to a DevHub
    keystone create base              - plain or managed-package project
    keystone create demo -d ~/code    - create under ~/code
    keystone create base --debug      - verbose logging on the console

Config: KEYSTONE_* environment variables or .env (see core/config.py).
        OUTPUT_DIR / DEBUG may also be set in ./keystone.env.
"""

import argparse
import asyncio
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from core.config import get_settings, load_cli_defaults
from core.log import setup_logging
from generators.base import ProjectGenerator
from generators.create_base import CreateBaseGenerator
from generators.create_demo import CreateDemoGenerator

logger = logging.getLogger("keystone.cli")


def _print_status(msg: str) -> None:
    print(f"\033[36m[keystone]\033[0m {msg}")


GENERATORS: dict[str, type[ProjectGenerator]] = {
    "demo": CreateDemoGenerator,
    "base": CreateBaseGenerator,
}


def _version() -> str:
    try:
        return version("keystone")
    except PackageNotFoundError:
        return "0.0.0+local"


def build_parser(defaults: dict | None = None) -> argparse.ArgumentParser:
    defaults = defaults or {}
    parser = argparse.ArgumentParser(
        prog="keystone",
        description="Keystone CLI - scaffold new projects from templates"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    sub = parser.add_subparsers(dest="command", required=True)

    # keystone create <kind>
    p_create = sub.add_parser("create", help="Create a new project")
    create_sub = p_create.add_subparsers(dest="kind", required=True)
    for kind, help_text in (
        ("demo", "Demo project connected to a DevHub and Environment Hub"),
        ("base", "Base project, optionally a managed package"),
    ):
        p_kind = create_sub.add_parser(kind, help=help_text)
        p_kind.add_argument(
            "-d", "--output-dir", default=defaults.get("output_dir", "."),
            help="Directory the project folder is created in (default: current directory)",
        )
        p_kind.add_argument(
            "--debug", action="store_true", default=defaults.get("debug", False),
            help="Show debug logging on the console",
        )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser(load_cli_defaults())
    args = parser.parse_args(argv)

    debug = args.debug or get_settings().debug
    setup_logging(debug)
    logger.debug("Arguments: %s", args)

    if args.command == "create":
        generator = GENERATORS[args.kind](Path(args.output_dir))
        try:
            exit_code = asyncio.run(generator.run())
        except KeyboardInterrupt:
            print()
            _print_status("Cancelled.")
            exit_code = 1
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
