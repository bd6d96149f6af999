"""Account commands for orgroles.

This module provides account-related functionality, currently listing users
together with the roles they hold.
"""

import typer

from . import users
from .users import list_users

app = typer.Typer(help="Inspect accounts of an organization and the roles they hold.")

app.command("users")(list_users)

__all__ = ["app", "users", "list_users"]
