"""Page-by-page enumeration of remote collections."""

import logging
from typing import Callable, Iterator, Protocol, TypeVar

from ..utils.models import Account, Page, SearchScope

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 100
FIRST_PAGE = 1


class AccountLister(Protocol):
    """Anything able to fetch a page of accounts."""

    def list_accounts(self, size: int, page: int, search: str = "") -> Page[Account]: ...


def iter_pages(fetch: Callable[[int], Page[T]], page_size: int) -> Iterator[Page[T]]:
    """
    Yield pages 1, 2, 3, ... until a short page is returned.

    A page holding fewer items than ``page_size`` (an empty one included) is
    the last page. Errors raised by ``fetch`` propagate unchanged.
    """
    page_index = FIRST_PAGE
    while True:
        page = fetch(page_index)
        yield page
        if page.is_last(page_size):
            return
        page_index += 1


class Paginator:
    """Feeds every account of a search scope to a consumer, page by page."""

    def __init__(
        self, connection: AccountLister, scope: SearchScope, page_size: int = DEFAULT_PAGE_SIZE
    ):
        if page_size < 1:
            raise ValueError(f"Page size must be at least 1, got {page_size}")
        self.connection = connection
        self.scope = scope
        self.page_size = page_size
        self.search_query = scope.search_query()

    def fetch(self, page_index: int) -> Page[Account]:
        """
        Fetch one page of accounts.

        Raises:
            TransportError: On network, authentication or HTTP failure
        """
        page = self.connection.list_accounts(
            size=self.page_size, page=page_index, search=self.search_query
        )
        logger.debug(f"Fetched page {page_index} with {page.size} accounts")
        return page

    def pages(self) -> Iterator[Page[Account]]:
        return iter_pages(self.fetch, self.page_size)

    def run(self, submit: Callable[[Account], None]) -> int:
        """
        Hand every account to ``submit`` in page order.

        The next page is requested as soon as the current one has been handed
        over; processing of submitted accounts is not awaited.

        Returns:
            Number of pages fetched
        """
        pages_fetched = 0
        for page in self.pages():
            pages_fetched += 1
            for account in page.items:
                submit(account)
        logger.info(f"Pagination finished after {pages_fetched} pages")
        return pages_fetched

