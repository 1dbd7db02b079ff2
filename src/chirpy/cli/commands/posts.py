"""Posting, timeline and search commands."""

from __future__ import annotations

from typing import Annotated

import typer

from chirpy.cli.console import error, print_posts, success, warning
from chirpy.cli.runtime import bootstrap


def register(app: typer.Typer) -> None:
    """Register post commands."""

    @app.command("post")
    def post(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Author")],
        content: Annotated[str, typer.Argument(help="Message text")],
    ) -> None:
        """Publish a post."""
        chirpy = bootstrap(ctx)
        if not chirpy.users.exists(username):
            error(f"Unknown account: {username}")
            raise typer.Exit(1)
        failures_before = len(chirpy.posts.write_failures)
        try:
            chirpy.post_service.post(username, content)
        except ValueError as e:
            error(str(e))
            raise typer.Exit(1) from None
        if len(chirpy.posts.write_failures) > failures_before:
            warning("Post could not be saved")
            raise typer.Exit(1)
        success("Posted")

    @app.command("posts")
    def posts(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Author")],
    ) -> None:
        """Show one account's posts in the order they were written."""
        chirpy = bootstrap(ctx)
        print_posts(f"Posts by {username}", chirpy.post_service.posts_by(username))

    @app.command("timeline")
    def timeline(
        ctx: typer.Context,
        following: Annotated[
            str | None,
            typer.Option(
                "--following",
                "-f",
                help="Only posts by accounts this user follows",
            ),
        ] = None,
    ) -> None:
        """Show posts, newest first."""
        chirpy = bootstrap(ctx)
        if following:
            print_posts(
                f"Timeline for {following}",
                chirpy.post_service.follow_timeline(following),
            )
        else:
            print_posts("Timeline", chirpy.post_service.timeline())

    @app.command("search")
    def search(
        ctx: typer.Context,
        term: Annotated[str, typer.Argument(help="Text or tag to look for")],
        by_user: Annotated[
            bool,
            typer.Option("--user", "-u", help="Treat TERM as a username"),
        ] = False,
    ) -> None:
        """Search posts by content or author."""
        chirpy = bootstrap(ctx)
        if by_user:
            results = chirpy.search.search_by_user(term)
        else:
            results = chirpy.search.search_by_tag(term)
        print_posts(f"Results for {term}", results)
