"""Configuration and session utilities for orgroles."""

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import jwt
import yaml
from rich.console import Console

from .errors import ConfigError

console = Console()
logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".orgroles"
CONFIG_FILE_YAML = CONFIG_DIR / "config.yaml"

DEFAULT_URL = "https://api.openshift.com"
DEFAULT_TOKEN_URL = (
    "https://sso.redhat.com/auth/realms/redhat-external/protocol/openid-connect/token"
)
DEFAULT_CLIENT_ID = "cloud-services"

DEFAULT_CONFIG = {
    "url": DEFAULT_URL,
    "token_url": DEFAULT_TOKEN_URL,
    "client_id": DEFAULT_CLIENT_ID,
    "timeout_seconds": 30,
}

# Keys accepted by 'orgroles config set'
CONFIG_KEYS = ("url", "token_url", "client_id", "access_token", "refresh_token", "timeout_seconds")

# Tokens expiring within this window are treated as expired
TOKEN_EXPIRY_SKEW_SECONDS = 60


class Config:
    """Manages orgroles configuration stored as YAML."""

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_file: Optional path overriding the default configuration file.
                The ORGROLES_CONFIG environment variable is used when not given.
        """
        env_file = os.environ.get("ORGROLES_CONFIG")
        if config_file is not None:
            self._config_file_yaml = Path(config_file)
        elif env_file:
            self._config_file_yaml = Path(env_file).expanduser()
        else:
            self._config_file_yaml = CONFIG_FILE_YAML
        self.config_data: Dict[str, Any] = {}
        self._config_loaded = False

    def _ensure_config_dir(self):
        """Ensure the configuration directory exists."""
        config_dir = self._config_file_yaml.parent
        if not config_dir.exists():
            config_dir.mkdir(parents=True)
            console.print(f"Created configuration directory: {config_dir}")

    def _ensure_config_loaded(self):
        """Ensure configuration is loaded from file."""
        if not self._config_loaded:
            self._load_config()
            self._config_loaded = True

    def _load_config(self):
        """Load the configuration from file."""
        if not self._config_file_yaml.exists():
            self.config_data = {}
            return

        try:
            with open(self._config_file_yaml, "r", encoding="utf-8") as f:
                self.config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Configuration file {self._config_file_yaml} is not valid YAML: {e}", e
            )
        except OSError as e:
            raise ConfigError(f"Can't load config file {self._config_file_yaml}: {e}", e)

        if not isinstance(self.config_data, dict):
            raise ConfigError(f"Configuration file {self._config_file_yaml} must contain a mapping")

    def save_config(self):
        """Save the configuration to the YAML file."""
        self._ensure_config_dir()
        try:
            with open(self._config_file_yaml, "w", encoding="utf-8") as f:
                yaml.dump(self.config_data, f, default_flow_style=False, indent=2, sort_keys=False)
        except OSError as e:
            raise ConfigError(f"Can't save config file {self._config_file_yaml}: {e}", e)
        # Tokens live in this file
        os.chmod(self._config_file_yaml, 0o600)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with dot notation support.

        Args:
            key: Configuration key (supports dot notation like "tokens.access")
            default: Default value if key doesn't exist

        Returns:
            Configuration value
        """
        self._ensure_config_loaded()

        if "." in key:
            value: Any = self.config_data
            for k in key.split("."):
                if isinstance(value, dict) and k in value:
                    value = value[k]
                else:
                    return default
            return value

        return self.config_data.get(key, default)

    def set(self, key: str, value: Any):
        """Set a configuration value and persist it."""
        self._ensure_config_loaded()
        self.config_data[key] = value
        self.save_config()

    def delete(self, key: str):
        """Delete a configuration value."""
        self._ensure_config_loaded()
        if key in self.config_data:
            del self.config_data[key]
            self.save_config()

    def get_all(self) -> Dict[str, Any]:
        """Get all configuration values."""
        self._ensure_config_loaded()
        return self.config_data.copy()

    def get_effective(self) -> Dict[str, Any]:
        """
        Get configuration merged with defaults and environment overrides.

        ORGROLES_URL overrides the API URL and ORGROLES_TOKEN the access token.
        """
        self._ensure_config_loaded()
        effective = DEFAULT_CONFIG.copy()
        effective.update({k: v for k, v in self.config_data.items() if v is not None})

        if os.environ.get("ORGROLES_URL"):
            effective["url"] = os.environ["ORGROLES_URL"]
        if os.environ.get("ORGROLES_TOKEN"):
            effective["access_token"] = os.environ["ORGROLES_TOKEN"]

        effective["timeout_seconds"] = self._get_int(effective.get("timeout_seconds"), 30)
        return effective

    def get_config_file_path(self) -> Path:
        """Get the path to the configuration file."""
        return self._config_file_yaml

    @staticmethod
    def _get_int(value: Any, default: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid integer value in configuration: {value!r}, using {default}")
            return default


def token_expiry(token: Optional[str]) -> Optional[float]:
    """
    Return the expiry timestamp of a JWT, or None if it never expires.

    Signatures are not verified here, the server does that. Tokens that are
    not JWTs are treated as opaque and without expiry.
    """
    if not token:
        return None
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        logger.debug("Token is not a JWT, treating it as opaque")
        return None
    exp = claims.get("exp")
    if exp is None or exp == 0:
        return None
    return float(exp)


def token_is_valid(token: Optional[str], now: Optional[float] = None) -> bool:
    """Check that a token is present and not about to expire."""
    if not token:
        return False
    expiry = token_expiry(token)
    if expiry is None:
        return True
    now = time.time() if now is None else now
    return expiry - TOKEN_EXPIRY_SKEW_SECONDS > now


@dataclass
class Session:
    """Credentials and endpoints needed to open a connection."""

    url: str
    token_url: str
    client_id: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    timeout_seconds: int = 30

    def armed(self, now: Optional[float] = None) -> bool:
        """True when at least one token can still be used."""
        return token_is_valid(self.access_token, now) or token_is_valid(self.refresh_token, now)


def load_session(config: Optional[Config] = None) -> Session:
    """
    Load the session from the configuration.

    Raises:
        ConfigError: If not logged in or the tokens have expired
    """
    config = config or Config()
    data = config.get_effective()

    if not data.get("access_token") and not data.get("refresh_token"):
        raise ConfigError("Not logged in, run the 'config login' command")

    session = Session(
        url=str(data["url"]).rstrip("/"),
        token_url=data["token_url"],
        client_id=data["client_id"],
        access_token=data.get("access_token"),
        refresh_token=data.get("refresh_token"),
        timeout_seconds=data["timeout_seconds"],
    )
    if not session.armed():
        raise ConfigError("Tokens have expired, run the 'config login' command")

    logger.debug(f"Loaded session for {session.url} from {config.get_config_file_path()}")
    return session
