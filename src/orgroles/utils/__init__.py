"""Core utility modules for orgroles."""

# Configuration utilities
from .config import CONFIG_DIR, CONFIG_FILE_YAML, Config, Session, load_session

# Error types
from .errors import (
    ConfigError,
    OrgRolesError,
    ResolutionError,
    ScopeResolutionError,
    TransportError,
)

# Data models
from .models import Account, ListingSummary, Organization, Page, ScopeKind, SearchScope

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE_YAML",
    "Config",
    "Session",
    "load_session",
    "ConfigError",
    "OrgRolesError",
    "ResolutionError",
    "ScopeResolutionError",
    "TransportError",
    "Account",
    "ListingSummary",
    "Organization",
    "Page",
    "ScopeKind",
    "SearchScope",
]
