"""Concurrent account role listing.

This package provides the listing pipeline:
- Paginator fetching accounts page by page
- WorkerPool resolving roles on a fixed number of threads
- Role filtering and fixed-width printing
- RoleListing tying them together
"""

from .filters import parse_roles, role_matches
from .orchestrator import ListingState, RoleListing, resolve_scope
from .paginator import DEFAULT_PAGE_SIZE, Paginator, iter_pages
from .printer import DEFAULT_PAD_WIDTH, RolePrinter, pad
from .resolver import RoleResolver
from .worker_pool import WorkerPool

__all__ = [
    "DEFAULT_PAD_WIDTH",
    "DEFAULT_PAGE_SIZE",
    "ListingState",
    "Paginator",
    "RoleListing",
    "RolePrinter",
    "RoleResolver",
    "WorkerPool",
    "iter_pages",
    "pad",
    "parse_roles",
    "resolve_scope",
    "role_matches",
]
