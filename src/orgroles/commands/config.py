"""Configuration management commands for orgroles."""

from typing import Any, Optional

import jwt
import typer
from rich.table import Table

from ..utils.config import CONFIG_KEYS, DEFAULT_URL, Config, token_expiry
from ..utils.errors import ConfigError
from .common import console, error_console

app = typer.Typer(help="Manage orgroles configuration: API endpoint and login tokens.")

TOKEN_KEYS = ("access_token", "refresh_token")


def _mask(key: str, value: Any) -> str:
    if key in TOKEN_KEYS and value:
        text = str(value)
        return f"{text[:6]}...{text[-4:]}" if len(text) > 12 else "****"
    return str(value)


@app.command("show")
def show_config() -> None:
    """Show the effective configuration with tokens masked."""
    try:
        config = Config()
        effective = config.get_effective()
    except ConfigError as e:
        error_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    table = Table(title="orgroles configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key in CONFIG_KEYS:
        if key not in effective:
            continue
        table.add_row(key, _mask(key, effective[key]))

    console.print(table)


@app.command("path")
def show_config_path() -> None:
    """Show the path to the configuration file."""
    config_path = Config().get_config_file_path()

    console.print(f"[green]Configuration file:[/green] {config_path}")
    if config_path.exists():
        console.print("[green]File exists:[/green] Yes")
    else:
        console.print("[yellow]File exists:[/yellow] No")


@app.command("set")
def set_config(
    key_value: str = typer.Argument(
        ..., help="Configuration key=value pair (e.g., url=https://api.example.com)"
    ),
) -> None:
    """Set a configuration value using key=value format.

    Examples:
    - orgroles config set url=https://api.stage.openshift.com
    - orgroles config set timeout_seconds=60
    """
    if "=" not in key_value:
        error_console.print("[red]Error: Invalid format. Use 'key=value' (e.g., url=...)[/red]")
        raise typer.Exit(1)

    key, value = (part.strip() for part in key_value.split("=", 1))
    if not key or not value:
        error_console.print("[red]Error: Both key and value are required[/red]")
        raise typer.Exit(1)
    if key not in CONFIG_KEYS:
        error_console.print(f"[red]Error: Unknown configuration key '{key}'[/red]")
        console.print(f"Available keys: {', '.join(CONFIG_KEYS)}")
        raise typer.Exit(1)

    parsed: Any = value
    if key == "timeout_seconds":
        try:
            parsed = int(value)
        except ValueError:
            error_console.print("[red]Error: timeout_seconds must be an integer[/red]")
            raise typer.Exit(1)

    try:
        Config().set(key, parsed)
    except ConfigError as e:
        error_console.print(f"[red]Error setting configuration: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓ Configuration '{key}' set to '{_mask(key, parsed)}'[/green]")


@app.command("login")
def login(
    token: str = typer.Option(
        ..., "--token", "-t", help="Offline or refresh token, or an access token."
    ),
    url: Optional[str] = typer.Option(
        None, "--url", "-u", help=f"API URL (defaults to {DEFAULT_URL})."
    ),
) -> None:
    """Store login credentials in the configuration file.

    Opaque tokens and JWTs of type Bearer are stored as access tokens,
    offline and refresh tokens as refresh tokens.
    """
    config = Config()
    try:
        if _is_access_token(token):
            config.set("access_token", token)
            config.delete("refresh_token")
        else:
            config.set("refresh_token", token)
            config.delete("access_token")
        if url:
            config.set("url", url.rstrip("/"))
    except ConfigError as e:
        error_console.print(f"[red]Error saving credentials: {e}[/red]")
        raise typer.Exit(1)

    expiry = token_expiry(token)
    console.print("[green]✓ Logged in.[/green]")
    if expiry is None:
        console.print("[blue]Token does not expire.[/blue]")


@app.command("logout")
def logout() -> None:
    """Remove stored tokens from the configuration file."""
    config = Config()
    try:
        for key in TOKEN_KEYS:
            config.delete(key)
    except ConfigError as e:
        error_console.print(f"[red]Error removing credentials: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Logged out.[/green]")


def _is_access_token(token: str) -> bool:
    """Opaque tokens and JWTs of type Bearer are access tokens."""
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return True
    return str(claims.get("typ", "")).lower() == "bearer"
