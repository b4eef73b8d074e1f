"""The command-line interface for repoview."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console
from rich.markup import escape

from repoview.cli._commands import register_commands
from repoview.cli._context import CLIContext
from repoview.cli._shared import ExitCode, exit_with_error
from repoview.config import safe_load_config
from repoview.exceptions import ConfigError
from repoview.utils import create_logger, create_null_logger

_HELP = (
    "Browse commit history and diffs of a Git repository. Authors are shown as"
    " recorded in Git; the CLI does not resolve them to accounts."
)


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    """Create the repoview CLI.

    Run it through ``app.meta`` so the global options are parsed:

    Example:
        >>> app = create_app()
        >>> app.meta(["--repo", "/srv/git/project.git", "log", "main"])
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="repoview",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file")
        ] = None,
        repo: Annotated[
            Path | None, Parameter(name="--repo", help="Path to the Git repository")
        ] = None,
    ) -> None:
        """Launch repoview with global options.

        Args:
            tokens: Command tokens to pass to subcommands.
            config: Explicit path to config file.
            repo: Repository to read (default: current directory).
        """
        try:
            loaded_config, config_error = safe_load_config(config_path=config)
        except ConfigError as e:
            exit_with_error(e.user_message, ExitCode.LOAD_ERROR, console=error_console)

        if config_error:
            error_console.print(
                f"[yellow]Warning:[/yellow] Failed to load config: {escape(config_error)}"
            )

        log_config = loaded_config.logging
        cli_logger = (
            create_logger(
                log_config.file,
                level=log_config.level.value,
                log_format=log_config.format.value,  # type: ignore[arg-type]
                command=tokens[0] if tokens else "",
            )
            if log_config.file
            else create_null_logger()
        )

        ctx = CLIContext(
            config=loaded_config,
            repo=repo if repo is not None else Path.cwd(),
            console=console,
            error_console=error_console,
            config_error=config_error,
            logger=cli_logger,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `repoview` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
