"""
Command-line interface for bu.

Provides the ``bu`` command with which, config and cache subcommands.
"""

from bukit.cli.parser import CLI, main

__all__ = ["CLI", "main"]
