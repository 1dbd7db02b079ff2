"""Main CLI application."""

from pathlib import Path
from typing import Annotated

import typer

from chirpy.cli.commands import register_all
from chirpy.cli.runtime import CliState

app = typer.Typer(
    name="chirpy",
    help="Chirpy - post short messages, follow people, read timelines",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
        ),
    ] = None,
    data_dir: Annotated[
        Path | None,
        typer.Option(
            "--data-dir",
            "-d",
            help="Directory holding the record stores",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log store activity at DEBUG level"),
    ] = False,
) -> None:
    """Chirpy command line."""
    from chirpy.config.paths import resolve_path
    from chirpy.logging import configure_logging

    state = CliState(config_path=config, data_dir=data_dir)
    ctx.obj = state

    settings = state.config()
    log_file = settings.logging.log_file
    configure_logging(
        level="DEBUG" if verbose else settings.logging.level,
        use_rich=settings.logging.use_rich,
        log_file=resolve_path(log_file) if log_file else None,
    )


register_all(app)


if __name__ == "__main__":
    app()
