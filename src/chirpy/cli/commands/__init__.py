"""CLI command modules."""

import typer

from chirpy.cli.commands import doctor, follows, posts, users

__all__ = [
    "doctor",
    "follows",
    "posts",
    "register_all",
    "users",
]


def register_all(app: typer.Typer) -> None:
    for module in (users, posts, follows, doctor):
        module.register(app)
