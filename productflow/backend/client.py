"""PostgREST client for the hosted catalog database.

Talks to the REST endpoint of a Supabase-style project:
- GET  /rest/v1/<table>?select=...&col=eq.value   (select)
- POST /rest/v1/<table>?select=id                 (insert, return=representation)

Authentication is the project API key, sent both as ``apikey`` and as a
bearer token.
"""

import json
import ssl
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Dict, List, Optional, Union

from ..config.models import BackendSettings
from ..utils.logger import get_logger
from .base import BackendError, CatalogBackend, Filters, FilterValue, ILike, In, Row

logger = get_logger(__name__)

# Characters that force a value to be quoted inside in.(...)
_RESERVED = set(',.:()"\\ ')


def _quote_list_value(value: Any) -> str:
    text = _scalar(value)
    if any(ch in _RESERVED for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_filter(value: FilterValue) -> str:
    """Encode a filter value as a PostgREST operator expression."""
    if value is None:
        return "is.null"
    if isinstance(value, In):
        return "in.(" + ",".join(_quote_list_value(v) for v in value.values) + ")"
    if isinstance(value, ILike):
        return f"ilike.{value.pattern}"
    return f"eq.{_scalar(value)}"


class BackendClient(CatalogBackend):
    """
    Catalog backend over HTTP.

    Configuration comes from :class:`BackendSettings`; every failure is
    raised as :class:`BackendError`.
    """

    name = "postgrest"

    def __init__(self, settings: BackendSettings):
        """
        Initialize the client.

        Args:
            settings: Backend connection settings
        """
        self.settings = settings

    def build_url(self, table: str, params: Optional[Dict[str, str]] = None) -> str:
        """Build the request URL for a table with query parameters."""
        url = f"{self.settings.rest_url}/{urllib.parse.quote(table)}"
        if params:
            url += "?" + urllib.parse.urlencode(
                params, safe=",.()*:", quote_via=urllib.parse.quote
            )
        return url

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Filters] = None,
        limit: Optional[int] = None,
        order: Optional[str] = None,
    ) -> List[Row]:
        params = {"select": "".join(columns.split())}
        for column, value in (filters or {}).items():
            params[column] = encode_filter(value)
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)

        result = self._request("GET", self.build_url(table, params))
        return result or []

    def insert(
        self,
        table: str,
        rows: Union[Row, List[Row]],
        returning: str = "id",
    ) -> List[Row]:
        payload = rows if isinstance(rows, list) else [rows]
        if not payload:
            return []

        url = self.build_url(table, {"select": "".join(returning.split())})
        result = self._request(
            "POST",
            url,
            data=payload,
            extra_headers={"Prefer": "return=representation"},
        )
        logger.debug(f"Inserted {len(payload)} row(s) into {table}")
        return result or []

    def ping(self) -> bool:
        """Check the REST root answers with the configured key."""
        try:
            self._request("GET", f"{self.settings.rest_url}/")
            return True
        except BackendError as e:
            logger.warning(f"Backend ping failed: {e}")
            return False

    def _headers(self, method: str) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.settings.api_key:
            headers["apikey"] = self.settings.api_key
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        if self.settings.schema_name != "public":
            profile = "Accept-Profile" if method == "GET" else "Content-Profile"
            headers[profile] = self.settings.schema_name
        return headers

    def _get_ssl_context(self):
        """Get SSL context for API requests."""
        if not self.settings.verify_ssl:
            context = ssl.create_default_context()
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
            return context
        return None

    def _request(
        self,
        method: str,
        url: str,
        data: Any = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make an API request and decode the JSON response."""
        if not self.settings.url:
            raise BackendError("Backend URL is not configured")

        req = urllib.request.Request(url, method=method)
        for key, value in self._headers(method).items():
            req.add_header(key, value)
        for key, value in (extra_headers or {}).items():
            req.add_header(key, value)

        if data is not None:
            req.data = json.dumps(data).encode("utf-8")

        logger.debug(f"{method} {url}")

        try:
            with urllib.request.urlopen(
                req,
                timeout=self.settings.timeout,
                context=self._get_ssl_context(),
            ) as resp:
                body = resp.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            raise self._error_from_response(e) from e
        except urllib.error.URLError as e:
            raise BackendError(f"Cannot reach backend: {e.reason}") from e
        except (TimeoutError, OSError) as e:
            raise BackendError(f"Backend request failed: {e}") from e

        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise BackendError(f"Invalid JSON from backend: {e}") from e

    @staticmethod
    def _error_from_response(error: urllib.error.HTTPError) -> BackendError:
        """Turn an HTTP error into a BackendError using the PostgREST body."""
        payload: Dict[str, Any] = {}
        try:
            raw = error.read().decode("utf-8")
            payload = json.loads(raw) if raw else {}
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        return BackendError(
            payload.get("message") or error.reason or "Request failed",
            status_code=error.code,
            code=payload.get("code"),
            details=payload.get("details"),
            hint=payload.get("hint"),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.settings.url})"
