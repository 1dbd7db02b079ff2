"""Follow graph commands."""

from __future__ import annotations

from typing import Annotated

import typer

from chirpy.cli.console import console, dim, error, success, warning
from chirpy.cli.runtime import bootstrap


def register(app: typer.Typer) -> None:
    """Register follow commands."""

    @app.command("follow")
    def follow(
        ctx: typer.Context,
        follower: Annotated[str, typer.Argument(help="Who follows")],
        followee: Annotated[str, typer.Argument(help="Who is followed")],
    ) -> None:
        """Follow an account."""
        chirpy = bootstrap(ctx)
        for name in (follower, followee):
            if not chirpy.users.exists(name):
                error(f"Unknown account: {name}")
                raise typer.Exit(1)
        try:
            saved = chirpy.follow_service.follow(follower, followee)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1) from None
        if not saved:
            warning("Follow could not be saved")
            raise typer.Exit(1)
        success(f"{follower} now follows {followee}")

    @app.command("unfollow")
    def unfollow(
        ctx: typer.Context,
        follower: Annotated[str, typer.Argument(help="Who follows")],
        followee: Annotated[str, typer.Argument(help="Who is followed")],
    ) -> None:
        """Stop following an account."""
        chirpy = bootstrap(ctx)
        try:
            saved = chirpy.follow_service.unfollow(follower, followee)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1) from None
        if not saved:
            warning("Unfollow could not be saved")
            raise typer.Exit(1)
        success(f"{follower} no longer follows {followee}")

    @app.command("following")
    def following(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Account")],
    ) -> None:
        """List accounts a user follows."""
        _print_names(bootstrap(ctx).follow_service.following(username))

    @app.command("followers")
    def followers(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Account")],
    ) -> None:
        """List accounts following a user."""
        _print_names(bootstrap(ctx).follow_service.followers(username))


def _print_names(names: list[str]) -> None:
    if not names:
        dim("Nobody")
        return
    for name in names:
        console.print(name, markup=False, highlight=False)
