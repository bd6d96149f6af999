"""Test fixtures package for orgroles.

- accounts: fake accounts management connection and sample account data

Usage:
    from tests.fixtures.accounts import FakeConnection, make_accounts
"""

from .accounts import (
    FakeConnection,
    fake_connection,
    make_accounts,
    sample_accounts,
    sample_roles,
)

__all__ = [
    "FakeConnection",
    "fake_connection",
    "make_accounts",
    "sample_accounts",
    "sample_roles",
]
