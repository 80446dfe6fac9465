"""
ToolsetKit CLI argument parser.

This module implements the command-line interface for ToolsetKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from toolsetkit.cli.utils import positive_float, positive_int
from toolsetkit.tools.reporter import EXIT_CANCELLED, EXIT_TOOL_FAILURE

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("toolsetkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """ToolsetKit command-line interface."""

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
            prog="tskit",
            description="ToolsetKit - bootstrap the developer tools a project needs",
            epilog='Use "tskit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"ToolsetKit {__version__}"
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
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./toolset.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_check_command(subparsers)
        self._add_list_command(subparsers)
        self._add_init_command(subparsers)

        return parser

    @staticmethod
    def _add_selection_options(parser):
        parser.add_argument(
            "--only",
            action="append",
            metavar="NAME",
            help="Only process this tool (can be used multiple times)",
        )
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the report as JSON",
        )
        parser.add_argument(
            "--probe-timeout",
            type=positive_float,
            metavar="SECONDS",
            help="Timeout for each version probe (default: 30)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            aliases=["bootstrap"],
            help="Install missing or outdated tools",
            description="Probe every declared tool, install the missing or "
            "outdated ones, and verify the result",
        )
        self._add_selection_options(parser)
        parser.add_argument(
            "--install-timeout",
            type=positive_float,
            metavar="SECONDS",
            help="Timeout for each install command (default: 900)",
        )
        parser.add_argument(
            "--timeout",
            type=positive_float,
            metavar="SECONDS",
            help="Run-level timeout; the in-flight install is terminated",
        )
        parser.add_argument(
            "--jobs",
            "-j",
            type=positive_int,
            default=1,
            metavar="N",
            help="Run up to N installer backends concurrently; tools sharing "
            "a backend always run one at a time. The backend is the install "
            "executable (or the module of python -m) unless a tool sets "
            "'backend' (default: 1)",
        )
        parser.add_argument(
            "--max-output",
            type=positive_int,
            metavar="CHARS",
            help="Installer output kept per failed tool (default: 800)",
        )
        parser.add_argument(
            "--no-lock",
            action="store_true",
            help="Do not take the cross-process install lock",
        )
        parser.add_argument(
            "--lock-timeout",
            type=positive_float,
            default=60.0,
            metavar="SECONDS",
            help="Wait this long for another install run to finish (default: 60)",
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        parser = subparsers.add_parser(
            "check",
            help="Report tool status without installing",
            description="Probe every declared tool and report which are "
            "missing or outdated; nothing is installed",
        )
        self._add_selection_options(parser)

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            help="List declared tools",
            description="List the tools declared by the configuration",
        )

    def _add_init_command(self, subparsers):
        """Add 'init' subcommand."""
        parser = subparsers.add_parser(
            "init",
            help="Write a starter toolset.yaml",
            description="Write toolset.yaml with the built-in tool set",
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite an existing configuration file",
        )

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
            return EXIT_TOOL_FAILURE

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return EXIT_CANCELLED
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return EXIT_TOOL_FAILURE

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
            level = logging.INFO
            format_str = "%(message)s"

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
            "install": "toolsetkit.cli.commands.install",
            "bootstrap": "toolsetkit.cli.commands.install",
            "check": "toolsetkit.cli.commands.check",
            "list": "toolsetkit.cli.commands.list_tools",
            "init": "toolsetkit.cli.commands.init",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return EXIT_TOOL_FAILURE

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
