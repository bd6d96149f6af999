"""Role filtering for account listings."""

from typing import AbstractSet, Iterable, List


def role_matches(account_roles: Iterable[str], wanted: AbstractSet[str]) -> bool:
    """
    Decide whether an account should be listed.

    Args:
        account_roles: Roles resolved for the account, in resolution order
        wanted: Requested roles; empty means no filtering

    Returns:
        True if ``wanted`` is empty or shares at least one role with the account
    """
    if not wanted:
        return True
    return any(role in wanted for role in account_roles)


def parse_roles(values: Iterable[str]) -> List[str]:
    """
    Split comma-separated role options into a de-duplicated list.

    ``["a,b", "c"]`` becomes ``["a", "b", "c"]``. Blank entries are dropped.
    """
    roles: List[str] = []
    for value in values:
        for role in value.split(","):
            role = role.strip()
            if role and role not in roles:
                roles.append(role)
    return roles
