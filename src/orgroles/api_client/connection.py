"""HTTP connection to the accounts management API."""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests

from ..utils.config import Session, token_is_valid
from ..utils.errors import TransportError
from ..utils.models import Account, Page

logger = logging.getLogger(__name__)

ACCOUNTS_MGMT_PATH = "/api/accounts_mgmt/v1"


class Connection:
    """
    Connection to the accounts management service.

    A single connection is shared by the paginator and every worker. Requests
    are read-only; the underlying requests.Session is safe for that use and
    token refresh is serialized with a lock.
    """

    def __init__(self, session: Session, http: Optional[requests.Session] = None):
        """
        Initialize the connection.

        Args:
            session: Loaded session with endpoints and tokens
            http: Optional requests session, mainly for tests
        """
        self.session = session
        self.url = session.url.rstrip("/")
        self.timeout = session.timeout_seconds
        self._http = http or requests.Session()
        self._http.headers.update({"Accept": "application/json"})
        self._access_token = session.access_token
        self._token_lock = threading.Lock()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._http.close()

    def _token(self) -> str:
        """Return a usable access token, refreshing it if needed."""
        with self._token_lock:
            if token_is_valid(self._access_token):
                return self._access_token  # type: ignore[return-value]
            if not token_is_valid(self.session.refresh_token):
                raise TransportError("Tokens have expired, run the 'config login' command")
            self._access_token = self._refresh_access_token()
            return self._access_token

    def _refresh_access_token(self) -> str:
        logger.debug(f"Refreshing access token using {self.session.token_url}")
        try:
            response = self._http.post(
                self.session.token_url,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self.session.client_id,
                    "refresh_token": self.session.refresh_token,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Can't refresh access token: {e}", e)

        if not response.ok:
            raise TransportError(
                f"Can't refresh access token: HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(f"Invalid token response: {e}", e)
        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise TransportError("Token response did not contain an access token")
        return token

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Send a GET request to the accounts management API.

        Args:
            path: Path relative to the accounts management prefix
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            TransportError: On connection failures and non-2xx responses
        """
        url = f"{self.url}{ACCOUNTS_MGMT_PATH}{path}"
        headers = {"Authorization": f"Bearer {self._token()}"}
        logger.debug(f"GET {url} params={params}")

        try:
            response = self._http.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Can't send request to {url}: {e}", e)

        if not response.ok:
            raise TransportError(
                f"{_error_reason(response)} (HTTP {response.status_code} from {path})",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON in response from {path}: {e}", e)

    def list(self, path: str, size: int, page: int, search: str = "") -> Dict[str, Any]:
        """Fetch one page of a collection endpoint."""
        params: Dict[str, Any] = {"page": page, "size": size}
        if search:
            params["search"] = search
        return self.get(path, params=params)

    def list_accounts(self, size: int, page: int, search: str = "") -> Page[Account]:
        """
        Fetch one page of accounts.

        Args:
            size: Requested page size
            page: 1-based page index
            search: Optional server-side search predicate

        Returns:
            Page with the accounts and the item count reported by the server
        """
        body = self.list("/accounts", size=size, page=page, search=search)
        items = [Account.from_api(item) for item in body.get("items") or []]
        return Page(
            items=items,
            size=_page_size(body, items),
            index=body.get("page", page),
            total=body.get("total"),
        )

    def current_account(self) -> Account:
        """Fetch the account of the authenticated user."""
        return Account.from_api(self.get("/current_account"))

    def list_role_bindings(self, size: int, page: int, search: str = "") -> Dict[str, Any]:
        """Fetch one page of role bindings as raw JSON."""
        return self.list("/role_bindings", size=size, page=page, search=search)


def _page_size(body: Dict[str, Any], items: List[Any]) -> int:
    size = body.get("size")
    if isinstance(size, int):
        return size
    return len(items)


def _error_reason(response: requests.Response) -> str:
    """Extract the error reason from an API error body."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "Request failed"
    if isinstance(body, dict):
        reason = body.get("reason") or body.get("error_description")
        if reason:
            return reason
    return response.reason or "Request failed"
