"""Drives a complete listing run: scope resolution, pagination and workers."""

import logging
from enum import Enum
from typing import Optional, Sequence

from ..api_client import Connection
from ..utils.errors import OrgRolesError, ScopeResolutionError, TransportError
from ..utils.models import Account, ListingSummary, SearchScope
from .filters import role_matches
from .paginator import DEFAULT_PAGE_SIZE, Paginator
from .printer import RolePrinter
from .resolver import RoleResolver
from .worker_pool import WorkerPool

logger = logging.getLogger(__name__)


class ListingState(str, Enum):
    """Lifecycle of a listing run."""

    INIT = "init"
    SCOPE_RESOLVED = "scope_resolved"
    LISTING = "listing"
    DONE = "done"
    FATAL = "fatal"


def resolve_scope(
    connection: Connection, org: Optional[str] = None, roles: Sequence[str] = ()
) -> SearchScope:
    """
    Decide how accounts are enumerated.

    An explicit organization wins, a role filter alone searches across all
    organizations, and otherwise the current user's organization is looked up
    with a single request.

    Raises:
        TransportError: If the current user can't be retrieved
        ScopeResolutionError: If the current user has no organization
    """
    if org:
        return SearchScope.explicit_org(org)
    if roles:
        return SearchScope.role_query(list(roles))

    try:
        current = connection.current_account()
    except TransportError as e:
        raise TransportError(
            f"Can't retrieve current user information: {e}", e, status_code=e.status_code
        )

    organization_id = current.organization_id
    if not organization_id:
        raise ScopeResolutionError("Failed to get current user organization")

    logger.debug(f"Using organization {organization_id} of current user {current.username}")
    return SearchScope.current_user_org(organization_id)


class RoleListing:
    """Lists accounts with their roles, optionally filtered by role."""

    def __init__(
        self,
        connection: Connection,
        org: Optional[str] = None,
        roles: Sequence[str] = (),
        workers: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
        printer: Optional[RolePrinter] = None,
        resolver: Optional[RoleResolver] = None,
        fail_fast: bool = True,
    ):
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}")
        if page_size < 1:
            raise ValueError(f"Page size must be at least 1, got {page_size}")
        self.connection = connection
        self.org = org
        self.roles = list(roles)
        self.wanted = frozenset(self.roles)
        self.workers = workers
        self.page_size = page_size
        self.printer = printer or RolePrinter()
        self.resolver = resolver or RoleResolver(connection)
        self.fail_fast = fail_fast
        self.scope: Optional[SearchScope] = None
        self.state = ListingState.INIT

    def resolve_scope(self) -> SearchScope:
        """Resolve the search scope once; later calls return the same scope."""
        if self.scope is None:
            try:
                self.scope = resolve_scope(self.connection, self.org, self.roles)
            except OrgRolesError:
                self.state = ListingState.FATAL
                raise
            self.state = ListingState.SCOPE_RESOLVED
        return self.scope

    def _handle(self, account: Account) -> None:
        """Resolve, filter and print one account; runs on a worker thread."""
        roles = self.resolver.roles_of(account)
        if not role_matches(roles, self.wanted):
            return
        self.printer.print_account(account.username, account.id, roles)

    def run(self) -> ListingSummary:
        """
        Run the listing to completion.

        Returns once every account has been processed and all workers exited.

        Raises:
            OrgRolesError: On configuration, transport or fatal resolution errors
        """
        scope = self.resolve_scope()
        summary = ListingSummary()
        paginator = Paginator(self.connection, scope, self.page_size)
        self.printer.print_header()

        pool = WorkerPool(self.workers, self._handle, fail_fast=self.fail_fast)
        self.printer.halted = lambda: pool.aborted

        def submit(account: Account) -> None:
            pool.submit(account)
            summary.accounts_submitted += 1

        self.state = ListingState.LISTING
        logger.info(
            f"Listing accounts ({scope.kind.value}) with {self.workers} workers, "
            f"page size {self.page_size}"
        )
        try:
            with pool:
                summary.pages_fetched = paginator.run(submit)
        except OrgRolesError:
            self.state = ListingState.FATAL
            raise

        summary.lines_printed = self.printer.lines_printed
        summary.errors = [str(error) for error in pool.errors]
        self.state = ListingState.DONE
        logger.info(
            f"Listed {summary.lines_printed} of {summary.accounts_submitted} accounts "
            f"from {summary.pages_fetched} pages"
        )
        return summary
