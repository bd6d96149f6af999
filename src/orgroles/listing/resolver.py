"""Role resolution for individual accounts."""

import logging
from typing import Any, Dict, List, Protocol

from ..utils.errors import ResolutionError, TransportError
from ..utils.models import Account, Page
from .paginator import iter_pages

logger = logging.getLogger(__name__)

ROLE_BINDINGS_PAGE_SIZE = 100


class RoleBindingLister(Protocol):
    """Anything able to fetch a page of role bindings."""

    def list_role_bindings(self, size: int, page: int, search: str = "") -> Dict[str, Any]: ...


class RoleResolver:
    """
    Resolves the roles held by an account through its role bindings.

    Each call produces a fresh list; nothing is cached across accounts.
    """

    def __init__(self, connection: RoleBindingLister, page_size: int = ROLE_BINDINGS_PAGE_SIZE):
        self.connection = connection
        self.page_size = page_size

    def _fetch(self, search: str, page_index: int) -> Page[str]:
        body = self.connection.list_role_bindings(
            size=self.page_size, page=page_index, search=search
        )
        items = body.get("items") or []
        size = body.get("size")
        return Page(
            items=[_role_id(binding) for binding in items],
            size=size if isinstance(size, int) else len(items),
            index=page_index,
        )

    def roles_of(self, account: Account) -> List[str]:
        """
        Return the role identifiers bound to an account, in server order.

        Raises:
            ResolutionError: If the role bindings can't be retrieved
        """
        search = f"account.id='{account.id}'"
        roles: List[str] = []
        try:
            for page in iter_pages(lambda index: self._fetch(search, index), self.page_size):
                roles.extend(role for role in page.items if role)
        except TransportError as e:
            raise ResolutionError(
                f"Failed to get roles for user '{account.username}': {e}",
                account_id=account.id,
                cause=e,
            )

        logger.debug(f"Resolved {len(roles)} roles for account {account.id}")
        return roles


def _role_id(binding: Dict[str, Any]) -> str:
    role = binding.get("role") or {}
    return role.get("id", "")
