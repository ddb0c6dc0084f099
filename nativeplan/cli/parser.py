"""
nativeplan CLI argument parser.

This module implements the command-line interface for nativeplan using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nativeplan import __version__
from nativeplan.core.exceptions import NativePlanError

logger = logging.getLogger(__name__)


class CLI:
    """nativeplan command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nativeplan",
            description="nativeplan - native build planning for the snmalloc shim",
            epilog='Use "nativeplan COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nativeplan {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_plan_command(subparsers)
        self._add_detect_command(subparsers)

        return parser

    def _add_context_arguments(self, parser):
        """Add the options that select where the build context comes from."""
        source = parser.add_mutually_exclusive_group()
        source.add_argument(
            "--context",
            type=Path,
            metavar="PATH",
            help="YAML build context file",
        )
        source.add_argument(
            "--from-env",
            action="store_true",
            help="Read the build context from Cargo build-script variables (default)",
        )

    def _add_plan_command(self, subparsers):
        """Add 'plan' subcommand."""
        parser = subparsers.add_parser(
            "plan",
            help="Produce the build plan",
            description="Produce compiler flags, defines and link directives",
        )
        self._add_context_arguments(parser)
        parser.add_argument(
            "--backend",
            choices=["cc", "cmake"],
            help="Backend to plan for (default: from context)",
        )
        parser.add_argument(
            "--format",
            choices=["json", "yaml", "cargo", "args"],
            default="json",
            help="Output format (default: json)",
        )
        parser.add_argument(
            "--output",
            "-o",
            type=Path,
            metavar="PATH",
            help="Write the plan to a file instead of stdout",
        )

    def _add_detect_command(self, subparsers):
        """Add 'detect' subcommand."""
        parser = subparsers.add_parser(
            "detect",
            help="Show detected target and compiler",
            description="Show the target environment, compiler and toggles a plan would use",
        )
        self._add_context_arguments(parser)

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except NativePlanError as e:
            logger.error(f"Error: {e}")
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(levelname)s: %(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "plan": "nativeplan.cli.commands.plan",
            "detect": "nativeplan.cli.commands.detect",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
