"""Command-line interface for polyclean.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- One subcommand per cleaning operation
- Progress bars for batch processing
- Quiet output mode
- Detailed error reporting
"""

from polyclean.cli.app import cli, main

__all__ = ["cli", "main"]
