#!/usr/bin/env python3
"""ArubaCloud machine tools — CLI entrypoint."""

import argparse

from acmachine.commands.create import register_create_command
from acmachine.commands.inspect import register_inspect_commands
from acmachine.commands.lifecycle import register_lifecycle_commands
from acmachine.logging_setup import setup_cli_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create and manage ArubaCloud machines")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "-s",
        "--storage-path",
        default=None,
        help="Machine store directory (fallback: MACHINE_STORAGE_PATH env var, then ~/.acmachine)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_create_command(subparsers)
    register_lifecycle_commands(subparsers)
    register_inspect_commands(subparsers)

    args = parser.parse_args(argv)
    setup_cli_logging(debug=args.debug)
    args.func(args)


if __name__ == "__main__":
    main()
