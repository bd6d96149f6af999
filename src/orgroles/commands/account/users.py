"""List users and their roles."""

from typing import List, Optional

import typer

from ...listing import DEFAULT_PAD_WIDTH, DEFAULT_PAGE_SIZE, RoleListing, RolePrinter, parse_roles
from ...utils.errors import OrgRolesError
from ..common import (
    configure_logging,
    debug_option,
    error_console,
    handle_api_error,
    open_connection,
)


def list_users(
    debug: bool = debug_option(),
    org: Optional[str] = typer.Option(
        None,
        "--org",
        help="Organization identifier. Defaults to the organization of the current user.",
    ),
    roles: Optional[List[str]] = typer.Option(
        None,
        "--roles",
        help=(
            "Role identifiers. Returns users with one or more of the specified roles. "
            'Multiple roles can be specified like: --roles="role1,role2,role3".'
        ),
    ),
    workers: int = typer.Option(
        1,
        "--workers",
        min=1,
        help=(
            "Used with --roles. Number of workers to which we distribute the load. "
            "Queries run faster but use more CPU."
        ),
    ),
    page_size: int = typer.Option(
        DEFAULT_PAGE_SIZE,
        "--pagesize",
        min=1,
        help=(
            "Size of page to return from the server. "
            "Larger page sizes equal faster search times with --roles."
        ),
    ),
    pad_width: int = typer.Option(
        DEFAULT_PAD_WIDTH, "--pad-width", min=2, help="Width of the user and user ID columns."
    ),
    continue_on_error: bool = typer.Option(
        False,
        "--continue-on-error",
        help="Skip users whose roles can't be retrieved instead of aborting.",
    ),
):
    """Retrieve users and their roles.

    Lists every user of the organization together with the roles they hold.
    With --roles, users of all organizations holding any of the given roles
    are listed instead.
    """
    configure_logging(debug)
    wanted = parse_roles(roles or [])

    try:
        connection = open_connection()
    except OrgRolesError as e:
        handle_api_error(e, "connecting", debug=debug)
        raise typer.Exit(1)

    with connection:
        listing = RoleListing(
            connection,
            org=org,
            roles=wanted,
            workers=workers,
            page_size=page_size,
            printer=RolePrinter(width=pad_width),
            fail_fast=not continue_on_error,
        )
        try:
            summary = listing.run()
        except OrgRolesError as e:
            handle_api_error(e, "listing users", debug=debug)
            raise typer.Exit(1)

    if summary.has_errors:
        error_console.print(
            f"\n[yellow]Roles could not be retrieved for {len(summary.errors)} users.[/yellow]",
            highlight=False,
        )
        raise typer.Exit(1)
