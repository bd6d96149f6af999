#!/usr/bin/env python3
"""
orgroles - Organization users and roles

A CLI tool listing the users of an organization and the roles they hold.
"""
import typer
from rich.console import Console

from . import __version__
from .commands import account, config

app = typer.Typer(
    help="Organization users and roles - list the accounts of an organization together with the roles each user holds.",
    add_completion=True,
    no_args_is_help=True,
)
console = Console()

# Add subcommands
app.add_typer(account.app, name="account")
app.add_typer(config.app, name="config")


@app.command()
def version():
    """Show the application version and exit."""
    console.print(f"orgroles version: {__version__}")
    raise typer.Exit()


if __name__ == "__main__":
    app()
