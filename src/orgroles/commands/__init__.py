"""Command modules for orgroles."""

from . import account, config

__all__ = ["account", "config"]
