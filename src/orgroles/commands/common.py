"""Common command infrastructure for orgroles CLI commands.

This module provides shared functionality for all CLI commands including:
- Standard options
- Session loading and connection setup
- Error handling and logging
"""

import logging
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..api_client import Connection
from ..utils.config import Config, load_session
from ..utils.errors import ConfigError, OrgRolesError, ResolutionError, TransportError
from ..utils.logging_config import LoggingConfig, setup_logging

# Shared instances
console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def debug_option() -> Any:
    """Create a standardized --debug option for commands."""
    return typer.Option(False, "--debug", help="Enable debug mode.")


def configure_logging(debug: bool = False) -> None:
    """Configure package logging for a command run."""
    setup_logging(LoggingConfig.for_debug(debug))
    if debug:
        logger.debug("Debug logging enabled")


def open_connection(config: Optional[Config] = None) -> Connection:
    """
    Load the session and open a connection to the API.

    Raises:
        ConfigError: If not logged in or the tokens have expired
        TransportError: If the connection can't be created
    """
    session = load_session(config)
    try:
        connection = Connection(session)
    except Exception as e:
        raise TransportError(f"Can't create connection: {e}", e)
    logger.debug(f"Created connection to {session.url}")
    return connection


def handle_api_error(error: Exception, operation: str, debug: bool = False) -> None:
    """
    Report an error consistently across commands.

    Args:
        error: The error that occurred
        operation: Description of the operation that failed
        debug: Whether to show the traceback
    """
    message = escape(str(error))
    if isinstance(error, ConfigError):
        error_console.print(f"[red]Error: {message}[/red]")
    elif isinstance(error, TransportError):
        error_console.print(f"[red]API error while {operation}: {message}[/red]")
    elif isinstance(error, ResolutionError):
        # Already reported by the failing worker
        logger.debug(f"Aborted {operation} after role resolution failure")
    elif isinstance(error, OrgRolesError):
        error_console.print(f"[red]Error in {operation}: {message}[/red]")
    else:
        error_console.print(f"[red]Unexpected error in {operation}: {message}[/red]")

    if debug:
        error_console.print_exception()
