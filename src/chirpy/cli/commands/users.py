"""Account commands."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.markup import escape

from chirpy.cli.console import console, create_table, dim, error, success, warning
from chirpy.cli.runtime import bootstrap
from chirpy.services import UsernameTaken


def register(app: typer.Typer) -> None:
    """Register account commands."""

    @app.command("register")
    def register_cmd(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="New username")],
        password: Annotated[
            str,
            typer.Option(
                "--password",
                "-p",
                prompt=True,
                hide_input=True,
                confirmation_prompt=True,
                help="Password for the new account",
            ),
        ],
    ) -> None:
        """Create an account."""
        chirpy = bootstrap(ctx)
        try:
            chirpy.users.register(username, password)
        except (UsernameTaken, ValueError) as e:
            error(str(e))
            raise typer.Exit(1) from None
        if username.strip() in chirpy.accounts.unsaved:
            warning(f"Created {username}, but the account could not be saved")
            raise typer.Exit(1)
        success(f"Created account {username}")

    @app.command("passwd")
    def passwd(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Account to update")],
        old: Annotated[
            str,
            typer.Option(
                "--old", prompt=True, hide_input=True, help="Current password"
            ),
        ],
        new: Annotated[
            str,
            typer.Option(
                "--new",
                prompt=True,
                hide_input=True,
                confirmation_prompt=True,
                help="New password",
            ),
        ],
    ) -> None:
        """Change an account's password."""
        chirpy = bootstrap(ctx)
        try:
            changed = chirpy.users.change_password(username, old, new)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1) from None
        if not changed:
            error("Unknown account or wrong password")
            raise typer.Exit(1)
        if username in chirpy.accounts.unsaved:
            warning("Password changed in memory but could not be saved")
            raise typer.Exit(1)
        success(f"Password updated for {username}")

    @app.command("users")
    def users(ctx: typer.Context) -> None:
        """List registered accounts."""
        chirpy = bootstrap(ctx)
        accounts = chirpy.users.users()
        if not accounts:
            dim("No accounts")
            return
        table = create_table(
            "Accounts",
            [("Username", "cyan"), ("Following", "dim"), ("Followers", "dim")],
        )
        for account in accounts:
            table.add_row(
                escape(account.username),
                str(len(chirpy.follow_service.following(account.username))),
                str(len(chirpy.follow_service.followers(account.username))),
            )
        console.print(table)
