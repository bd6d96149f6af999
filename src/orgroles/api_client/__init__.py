"""Client for the accounts management API.

This package provides the HTTP connection shared by the paginator and the
role-resolution workers.
"""

from .connection import ACCOUNTS_MGMT_PATH, Connection

__all__ = ["ACCOUNTS_MGMT_PATH", "Connection"]
