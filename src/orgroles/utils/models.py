"""Data models for accounts, organizations and listing scopes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ScopeKind(str, Enum):
    """How accounts are enumerated for a run."""

    EXPLICIT_ORG = "explicit_org"
    ROLE_QUERY = "role_query"
    CURRENT_USER_ORG = "current_user_org"


@dataclass(frozen=True)
class Organization:
    """An organization (tenant) grouping user accounts."""

    id: str
    name: Optional[str] = None
    external_id: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Organization":
        """Build an organization from an API payload."""
        return cls(
            id=data.get("id") or "",
            name=data.get("name"),
            external_id=data.get("external_id"),
        )


@dataclass(frozen=True)
class Account:
    """
    A user account returned by the account-listing service.

    Accounts are immutable once fetched. A page fetch creates them and exactly
    one worker consumes each of them.
    """

    id: str
    username: str
    organization: Optional[Organization] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Account":
        """Build an account from an API payload."""
        organization = data.get("organization")
        return cls(
            id=data.get("id") or "",
            username=data.get("username") or "",
            organization=Organization.from_api(organization) if organization else None,
            email=data.get("email"),
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
        )

    @property
    def organization_id(self) -> Optional[str]:
        """Identifier of the account's home organization, if known."""
        if self.organization and self.organization.id:
            return self.organization.id
        return None


@dataclass(frozen=True)
class SearchScope:
    """
    Selection of how accounts are enumerated.

    Exactly one kind is active per run. It is chosen once at startup and
    never changed.
    """

    kind: ScopeKind
    organization_id: Optional[str] = None
    roles: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Check that organization scopes carry an organization id."""
        if self.kind != ScopeKind.ROLE_QUERY and not self.organization_id:
            raise ValueError(f"Scope '{self.kind.value}' requires an organization id")

    @classmethod
    def explicit_org(cls, organization_id: str) -> "SearchScope":
        return cls(kind=ScopeKind.EXPLICIT_ORG, organization_id=organization_id)

    @classmethod
    def role_query(cls, roles: List[str]) -> "SearchScope":
        return cls(kind=ScopeKind.ROLE_QUERY, roles=list(roles))

    @classmethod
    def current_user_org(cls, organization_id: str) -> "SearchScope":
        return cls(kind=ScopeKind.CURRENT_USER_ORG, organization_id=organization_id)

    def search_query(self) -> str:
        """Server-side search predicate for the account listing."""
        if self.kind == ScopeKind.ROLE_QUERY:
            # Cross-organization search, roles are filtered client side
            return ""
        return f"organization_id='{self.organization_id}'"


@dataclass
class Page(Generic[T]):
    """One bounded batch of items returned by a single list request."""

    items: List[T]
    size: int
    index: int
    total: Optional[int] = None

    def is_last(self, page_size: int) -> bool:
        """A page holding fewer items than requested is the last one."""
        return self.size < page_size


@dataclass
class ListingSummary:
    """Counters describing a completed listing run."""

    pages_fetched: int = 0
    accounts_submitted: int = 0
    lines_printed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
