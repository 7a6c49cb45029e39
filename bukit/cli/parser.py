"""
bu CLI argument parser.

This module implements the command-line interface for bu using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("bukit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """bu command-line interface."""

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
            prog="bu",
            description="bu - provision build tool binaries on demand",
            epilog='Use "bu COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument("--version", action="version", version=f"bu {__version__}")
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
            help="Path to configuration file (default: ./bu.star or ./bu.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="PATH",
            help="Tool cache directory (default: $BU_CACHE_DIR or ~/.bu/cache)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_which_command(subparsers)
        self._add_config_command(subparsers)
        self._add_cache_command(subparsers)

        return parser

    def _add_which_command(self, subparsers):
        """Add 'which' subcommand."""
        parser = subparsers.add_parser(
            "which",
            help="Show the resolved tool path",
            description="Resolve a tool (acquiring it if needed) and print its path",
        )
        parser.add_argument("tool", metavar="TOOL", help="Tool name (e.g., buck2)")
        parser.add_argument(
            "tool_version",
            metavar="VERSION",
            nargs="?",
            default="latest",
            help="Tool version (default: latest)",
        )
        parser.add_argument(
            "--offline",
            action="store_true",
            help="Do not download tools (file:// URLs only)",
        )

    def _add_config_command(self, subparsers):
        """Add 'config' subcommand."""
        parser = subparsers.add_parser(
            "config",
            help="Show effective tool configuration",
            description="Show the definition and strategy order for a tool",
        )
        parser.add_argument("tool", metavar="TOOL", help="Tool name (e.g., buck2)")

    def _add_cache_command(self, subparsers):
        """Add 'cache' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(
            "cache",
            help="Manage the tool cache",
            description="List or clean cached tool binaries",
        )

        cache_subparsers = parser.add_subparsers(
            dest="cache_command", help="Cache management commands", metavar="COMMAND"
        )
        cache_subparsers.add_parser("list", help="List cached tools")
        cache_subparsers.add_parser("clean", help="Remove all cached tools")

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
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
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
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
        if args.command == "cache":
            return self._dispatch_cache_command(args)

        command_map = {
            "which": "bukit.cli.commands.which",
            "config": "bukit.cli.commands.config",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)

    def _dispatch_cache_command(self, args) -> int:
        """
        Dispatch cache sub-commands.

        Args:
            args: Parsed arguments with cache_command field

        Returns:
            Exit code from command handler
        """
        if not getattr(args, "cache_command", None):
            logger.error("No cache sub-command specified")
            return 1

        from bukit.cli.commands import cache

        cache_command_map = {
            "list": cache.run_list,
            "clean": cache.run_clean,
        }

        handler = cache_command_map.get(args.cache_command)
        if not handler:
            logger.error(f"Unknown cache command: {args.cache_command}")
            return 1

        return handler(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
