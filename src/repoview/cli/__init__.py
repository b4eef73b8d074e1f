"""The repoview command-line interface."""

from repoview.cli._app import create_app, main
from repoview.cli._context import CLIContext
from repoview.cli._shared import ExitCode, OutputFormat

__all__ = ["CLIContext", "ExitCode", "OutputFormat", "create_app", "main"]
