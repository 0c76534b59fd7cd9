"""
HTTP client for the fund manager API, with a small query cache.

Reads go through `QueryCache`: a cached list is reused until the polling
interval passes, and every write drops the cached reads it can affect, so
the next read refetches. The session token lives only in this object.
"""
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from fundmanager.config import settings
from fundmanager.logger import get_logger

logger = get_logger(__name__)

# Derived views recomputed from the collections; any write may change them
DERIVED_VIEWS = ("/api/dashboard",)


class ApiError(Exception):
    """Non-2xx response, carrying the server's `error` message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class GuestModeError(ApiError):
    """Write attempted from a read-only guest session."""

    def __init__(self, message: str = "Guest sessions are read-only. Sign in as an admin to make changes."):
        super().__init__(403, message)


class QueryCache:
    """
    Cache of GET results keyed by path and query string.

    Entries older than `poll_interval` seconds are treated as missing.
    """

    def __init__(self, poll_interval: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.poll_interval = poll_interval
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}

    @staticmethod
    def key(path: str, params: Optional[Dict[str, Any]] = None) -> str:
        if not params:
            return path
        query = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] is not None)
        return f"{path}?{query}" if query else path

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, data = entry
        if self._clock() - stored_at >= self.poll_interval:
            del self._entries[key]
            return None
        return data

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = (self._clock(), data)

    def invalidate(self, prefixes: Iterable[str]) -> int:
        """Drop every entry whose key starts with one of `prefixes`."""
        prefixes = tuple(prefixes)
        stale = [key for key in self._entries if key.startswith(prefixes)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class Collection:
    """List/create/update/delete for one entity route family."""

    def __init__(
        self,
        client: "FundManagerClient",
        path: str,
        related: Tuple[str, ...] = (),
        deletable: bool = True,
    ):
        self._client = client
        self.path = path
        self.related = related
        self.deletable = deletable

    @property
    def _affected(self) -> Tuple[str, ...]:
        return (self.path,) + self.related + DERIVED_VIEWS

    def list(self, refresh: bool = False, **params: Any) -> List[Dict[str, Any]]:
        return self._client.query(self.path, params=params, refresh=refresh)

    def create(self, **fields: Any) -> Dict[str, Any]:
        rows = self._client.mutate("POST", self.path, json=fields, invalidate=self._affected)
        return rows[0]

    def update(self, row_id: str, **fields: Any) -> Dict[str, Any]:
        rows = self._client.mutate("PATCH", self.path, json={"id": row_id, **fields}, invalidate=self._affected)
        return rows[0]

    def delete(self, row_id: str) -> None:
        if not self.deletable:
            raise ApiError(405, f"{self.path} does not support delete")
        self._client.mutate("DELETE", f"{self.path}/{row_id}", invalidate=self._affected)


class FundManagerClient:
    """
    Client for the fund manager REST API.

    Args:
        base_url: API root, defaults to the configured API_BASE_URL
        http: Pre-built httpx client (tests pass FastAPI's TestClient)
        poll_interval: Seconds a cached read stays fresh
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        poll_interval: Optional[float] = None,
        timeout: float = 30.0,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._http = http or httpx.Client(base_url=self.base_url, timeout=timeout)
        self._owns_http = http is None
        self.cache = QueryCache(
            poll_interval=settings.client_poll_interval if poll_interval is None else poll_interval
        )
        self.token: Optional[str] = None
        self.principal: Optional[Dict[str, Any]] = None
        self.role = "guest"

        self.members = Collection(self, "/api/members", related=("/api/strikes/summary", "/api/task-completions/history"))
        self.resources = Collection(self, "/api/resources")
        self.inventory = Collection(self, "/api/inventory", deletable=False)
        self.tasks = Collection(self, "/api/tasks")
        self.task_completions = Collection(self, "/api/task-completions")
        self.strikes = Collection(self, "/api/strikes")
        self.crafted_items = Collection(self, "/api/crafted-items")
        self.orders = Collection(self, "/api/orders")

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    @property
    def is_guest(self) -> bool:
        return self.token is None

    @property
    def can_write(self) -> bool:
        return self.role == "admin"

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """Sign in and keep the session token in memory."""
        data = self._request("POST", "/api/auth/login", json={"username": username, "password": password})
        self.token = data["access_token"]
        self.role = data.get("role", "member")
        self.principal = {k: data.get(k) for k in ("id", "username", "display_name", "role")}
        self.cache.clear()
        logger.info(f"Signed in as {username} ({self.role})")
        return self.principal

    def login_as_guest(self) -> Dict[str, Any]:
        self.logout()
        return self._request("POST", "/api/auth/guest")

    def logout(self) -> None:
        self.token = None
        self.principal = None
        self.role = "guest"
        self.cache.clear()

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "FundManagerClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        send = self._send_idempotent if method == "GET" else self._send
        try:
            response = send(method, path, json=json, params=params or None)
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} could not reach {self.base_url}: {e}")
            raise ApiError(503, f"API unreachable: {e}") from e
        if response.status_code >= 400:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            logger.debug(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return self._http.request(method, path, headers=self.headers, **kwargs)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    def _send_idempotent(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Same as `_send`, retried on connection-level failures; only used for reads."""
        return self._send(method, path, **kwargs)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def query(self, path: str, params: Optional[Dict[str, Any]] = None, refresh: bool = False) -> Any:
        """Cached GET; `refresh` skips the cache."""
        key = QueryCache.key(path, params)
        if not refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
        data = self._get(path, params)
        self.cache.set(key, data)
        return data

    def mutate(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        invalidate: Iterable[str] = (),
    ) -> Any:
        """Send a write and drop the cached reads it affects."""
        if not self.can_write:
            raise GuestModeError()
        data = self._request(method, path, json=json)
        self.cache.invalidate(tuple(invalidate) or (path,))
        return data

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def dashboard(self, refresh: bool = False) -> Dict[str, Any]:
        return self.query("/api/dashboard", refresh=refresh)

    def current_inventory(self, refresh: bool = False) -> List[Dict[str, Any]]:
        return self.query("/api/inventory/current", refresh=refresh)

    def set_inventory_level(self, resource_id: str, quantity: int) -> Dict[str, Any]:
        rows = self.mutate(
            "PUT",
            f"/api/inventory/{resource_id}",
            json={"quantity": quantity},
            invalidate=("/api/inventory",) + DERIVED_VIEWS,
        )
        return rows[0]

    def strike_summary(self, refresh: bool = False) -> List[Dict[str, Any]]:
        return self.query("/api/strikes/summary", refresh=refresh)

    def completion_history(self, refresh: bool = False) -> List[Dict[str, Any]]:
        return self.query("/api/task-completions/history", refresh=refresh)

    def daily_completions(self, refresh: bool = False, **params: Any) -> List[Dict[str, Any]]:
        return self.query("/api/task-completions/daily", params=params, refresh=refresh)

    def order_board(self, refresh: bool = False) -> Dict[str, Any]:
        return self.query("/api/orders/board", refresh=refresh)
