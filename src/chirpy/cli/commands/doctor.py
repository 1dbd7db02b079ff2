"""Store health check."""

from __future__ import annotations

import typer

from chirpy.cli.console import console, create_table, success, warning
from chirpy.cli.runtime import bootstrap
from chirpy.store import LoadFailure


def register(app: typer.Typer) -> None:
    """Register the doctor command."""

    @app.command("doctor")
    def doctor(ctx: typer.Context) -> None:
        """Load every store and report files that could not be decoded."""
        chirpy = bootstrap(ctx)
        table = create_table(
            "Stores",
            [("Type", "cyan"), ("Directory", "dim"), ("Files", ""), ("Skipped", "")],
        )
        problems: list[tuple[str, LoadFailure]] = []
        for store in chirpy.stores():
            failures = store.last_errors
            problems.extend((store.tag, failure) for failure in failures)
            table.add_row(
                store.tag,
                str(store.directory),
                str(len(store.keys())),
                str(len(failures)),
            )
        console.print(table)

        if not problems:
            success("All records loaded")
            return
        for tag, failure in problems:
            warning(f"{tag}/{failure.path.name}: {failure.reason}")
        raise typer.Exit(1)
