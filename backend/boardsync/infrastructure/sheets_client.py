"""Google Sheets Table Store: TabularStore over the Sheets v4 REST API (httpx).

Invariants:
    - One sheet per table; row 1 is the header, the body is range `{Sheet}!A2:Z`
    - Writes use valueInputOption=RAW (cells land exactly as encoded)
    - Missing spreadsheet id, HTTP 401/403/404: ConfigurationError (never retried)
    - Any other HTTP status, timeout or transport failure: TransientIOError
    - No retries here; a failed call fails the sync cycle it belongs to

Design Decisions:
    - httpx.AsyncClient over the generated Google client: one small async surface,
      and tests swap in httpx.MockTransport
    - Credentials arrive as a ready bearer token (token acquisition lives elsewhere)
"""

import logging
from urllib.parse import quote

import httpx

from boardsync.core.domain_types import Row
from boardsync.core.errors import ConfigurationError, ErrorContext, TransientIOError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://sheets.googleapis.com/v4"
_CONFIGURATION_STATUSES = frozenset({401, 403, 404})


def body_range(name: str) -> str:
    return f"{name}!A2:Z"


def header_range(name: str) -> str:
    return f"{name}!A1"


class SheetsTableStore:
    """TabularStore backed by one Google spreadsheet."""

    def __init__(
        self,
        spreadsheet_id: str | None,
        access_token: str = "",
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def read_table(self, name: str) -> list[Row]:
        response = await self._request(
            "GET", self._values_path(body_range(name)), "read", name,
        )
        return response.json().get("values", [])

    async def clear_table_body(self, name: str) -> None:
        await self._request(
            "POST", self._values_path(body_range(name)) + ":clear", "clear", name,
        )

    async def write_table_body(self, name: str, rows: list[Row]) -> None:
        await self._request(
            "PUT", self._values_path(f"{name}!A2"), "write", name,
            params={"valueInputOption": "RAW"},
            json={"values": rows},
        )

    async def ensure_table_exists(self, name: str) -> None:
        response = await self._request(
            "GET", self._spreadsheet_path(), "describe", name,
            params={"fields": "sheets.properties.title"},
        )
        titles = {
            sheet.get("properties", {}).get("title")
            for sheet in response.json().get("sheets", [])
        }
        if name in titles:
            return
        await self._request(
            "POST", self._spreadsheet_path() + ":batchUpdate", "create", name,
            json={"requests": [{"addSheet": {"properties": {"title": name}}}]},
        )
        logger.info("Created sheet %s", name, extra={"table": name})

    async def ensure_header_row(self, name: str, headers: list[str]) -> None:
        await self._request(
            "PUT", self._values_path(header_range(name)), "header", name,
            params={"valueInputOption": "RAW"},
            json={"values": [headers]},
        )

    async def close(self) -> None:
        await self.client.aclose()

    # --- Internals ------------------------------------------------------------

    def _spreadsheet_path(self) -> str:
        return f"/spreadsheets/{self.spreadsheet_id}"

    def _values_path(self, a1_range: str) -> str:
        return f"{self._spreadsheet_path()}/values/{quote(a1_range, safe='!:')}"

    async def _request(
        self, method: str, path: str, operation: str, table: str, **kwargs,
    ) -> httpx.Response:
        """Issue one API call, mapping every failure onto the sync error taxonomy."""
        context = ErrorContext(table_name=table, operation=operation)
        if not self.spreadsheet_id:
            raise ConfigurationError("Spreadsheet ID not configured", context)
        try:
            response = await self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status in _CONFIGURATION_STATUSES:
                raise ConfigurationError(
                    f"Spreadsheet rejected {operation} of {table} (HTTP {status})",
                    context,
                ) from e
            raise TransientIOError(
                f"HTTP {status}", operation, table, context,
            ) from e
        except httpx.TimeoutException as e:
            raise TransientIOError("timeout", operation, table, context) from e
        except httpx.TransportError as e:
            raise TransientIOError(str(e) or type(e).__name__, operation, table, context) from e
