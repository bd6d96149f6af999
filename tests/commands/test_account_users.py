"""Tests for the account users command."""

import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from orgroles.cli import app
from orgroles.utils.errors import ConfigError, TransportError
from orgroles.utils.models import Account, Organization
from tests.fixtures.accounts import (  # noqa: F401
    FakeConnection,
    make_accounts,
    sample_accounts,
    sample_roles,
)

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logging.getLogger("orgroles").handlers.clear()


def _user_lines(output):
    return [line for line in output.splitlines() if line.startswith("user")]


def _invoke(connection, *args):
    with patch("orgroles.commands.account.users.open_connection", return_value=connection):
        return runner.invoke(app, ["account", "users", *args])


def test_lists_every_user_of_the_current_organization():
    accounts = make_accounts(150)
    connection = FakeConnection(
        accounts=accounts,
        roles={account.id: ["OrganizationAdmin"] for account in accounts},
        current=Account(id="me", username="me", organization=Organization(id="org-1")),
    )

    result = _invoke(connection, "--pagesize", "100", "--workers", "4")

    assert result.exit_code == 0
    assert result.stdout.splitlines()[0].startswith("USER")
    assert "USER ID" in result.stdout.splitlines()[0]
    assert len(_user_lines(result.stdout)) == 150
    assert connection.current_account_calls == 1
    assert [call[1] for call in connection.list_calls] == [1, 2]
    assert connection.closed


def test_roles_filter_lists_only_matching_users(sample_accounts, sample_roles):
    connection = FakeConnection(accounts=sample_accounts, roles=sample_roles)

    result = _invoke(connection, "--roles", "A")

    assert result.exit_code == 0
    lines = _user_lines(result.stdout)
    assert len(lines) == 2
    assert not any(sample_accounts[1].username in line for line in lines)
    assert connection.current_account_calls == 0
    assert all(search == "" for _, _, search in connection.list_calls)


def test_comma_separated_roles(sample_accounts, sample_roles):
    connection = FakeConnection(accounts=sample_accounts, roles=sample_roles)

    result = _invoke(connection, "--roles", "A,B", "--workers", "2")

    assert result.exit_code == 0
    assert len(_user_lines(result.stdout)) == 3


def test_explicit_org(sample_accounts, sample_roles):
    connection = FakeConnection(accounts=sample_accounts, roles=sample_roles)

    result = _invoke(connection, "--org", "org-1")

    assert result.exit_code == 0
    assert connection.list_calls[0][2] == "organization_id='org-1'"
    assert len(_user_lines(result.stdout)) == 3


def test_pad_width_option(sample_accounts, sample_roles):
    connection = FakeConnection(accounts=sample_accounts, roles=sample_roles)

    result = _invoke(connection, "--org", "org-1", "--pad-width", "10")

    assert result.exit_code == 0
    first = _user_lines(result.stdout)[0]
    assert first == f"{sample_accounts[0].username:<10} user-id-   A"


def test_not_logged_in():
    with patch(
        "orgroles.commands.account.users.open_connection",
        side_effect=ConfigError("Not logged in, run the 'config login' command"),
    ):
        result = runner.invoke(app, ["account", "users"])

    assert result.exit_code == 1
    assert "Not logged in" in result.output


def test_current_user_lookup_failure():
    connection = FakeConnection(fail_current_account=True)

    result = _invoke(connection)

    assert result.exit_code == 1
    assert "Can't retrieve current user information" in result.output


def test_page_failure_aborts(sample_accounts, sample_roles):
    connection = FakeConnection(accounts=sample_accounts, roles=sample_roles, fail_on_page=1)

    result = _invoke(connection, "--org", "org-1")

    assert result.exit_code == 1
    assert "service unavailable" in result.output


def test_role_resolution_failure_is_fatal(sample_accounts, sample_roles):
    connection = FakeConnection(
        accounts=sample_accounts,
        roles=sample_roles,
        failing_accounts=[sample_accounts[1].id],
    )

    result = _invoke(connection, "--org", "org-1")

    assert result.exit_code == 1
    assert f"Failed to get roles for user '{sample_accounts[1].username}'" in result.output


def test_continue_on_error_prints_remaining_users(sample_accounts, sample_roles):
    connection = FakeConnection(
        accounts=sample_accounts,
        roles=sample_roles,
        failing_accounts=[sample_accounts[1].id],
    )

    result = _invoke(connection, "--org", "org-1", "--continue-on-error")

    assert result.exit_code == 1
    printed = [line.split()[0] for line in _user_lines(result.stdout)]
    assert sorted(printed) == [sample_accounts[0].username, sample_accounts[2].username]
    assert "Roles could not be retrieved for 1 users" in result.output


def test_invalid_workers():
    result = runner.invoke(app, ["account", "users", "--workers", "0"])

    assert result.exit_code == 2


def test_transport_error_while_connecting():
    with patch(
        "orgroles.commands.account.users.open_connection",
        side_effect=TransportError("Can't create connection: boom"),
    ):
        result = runner.invoke(app, ["account", "users"])

    assert result.exit_code == 1
    assert "Can't create connection" in result.output
