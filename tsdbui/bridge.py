"""Backend bridges that carry schema and query commands to the native side."""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

import httpx

LOG = logging.getLogger(__name__)

Args = Mapping[str, object]


class BridgeError(RuntimeError):
    """Raised when a backend command fails or is unknown."""


@runtime_checkable
class BackendBridge(Protocol):
    """Asynchronous command channel to the backend."""

    async def call(self, command: str, args: Args) -> Any:
        """Run ``command`` with ``args`` and return its decoded result."""


class HttpBridge:
    """Bridge that posts commands as JSON to the backend's HTTP sidecar.

    Each command is sent to ``{base_url}/invoke/{command}`` with a body of
    ``{"args": {...}}``. The response body is either ``{"result": ...}`` or
    ``{"error": "..."}``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        return self._client

    async def call(self, command: str, args: Args) -> Any:
        try:
            response = await self.client.post(f"/invoke/{command}", json={"args": dict(args)})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BridgeError(f"Command '{command}' failed: {exc}") from exc
        if isinstance(payload, dict):
            error = payload.get("error")
            if error:
                raise BridgeError(f"Command '{command}' failed: {error}")
            if "result" in payload:
                return payload["result"]
        return payload

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


SchemaPreset = Mapping[str, Mapping[str, Mapping[str, Sequence[str]]]]

DEMO_SCHEMAS: SchemaPreset = {
    "telegraf": {
        "cpu": {
            "fields": ("usage_idle", "usage_system", "usage_user"),
            "tags": ("cpu", "host"),
        },
        "mem": {
            "fields": ("available", "used", "used_percent"),
            "tags": ("host",),
        },
        "disk": {
            "fields": ("free", "used", "used_percent"),
            "tags": ("device", "host", "path"),
        },
    },
    "root.factory": {
        "root.factory.line1": {"fields": ("temperature", "pressure"), "tags": ()},
        "root.factory.line2": {"fields": ("temperature", "speed"), "tags": ()},
    },
}


class DemoBridge:
    """In-memory bridge that answers schema commands from preset data."""

    def __init__(
        self,
        schemas: SchemaPreset | None = None,
        *,
        disabled_commands: Sequence[str] = (),
    ) -> None:
        self._schemas = schemas if schemas is not None else DEMO_SCHEMAS
        self._disabled = frozenset(disabled_commands)
        self.calls: list[tuple[str, dict[str, object]]] = []

    async def call(self, command: str, args: Args) -> Any:
        self.calls.append((command, dict(args)))
        if command in self._disabled:
            raise BridgeError(f"Command '{command}' is not available.")
        database = str(args.get("database") or "")
        if command in {"get_measurements", "get_tables", "get_query_suggestions"}:
            return sorted(self._tables(database))
        if command == "get_field_keys":
            return list(self._columns(database, str(args.get("measurement") or ""), "fields"))
        if command == "get_tag_keys":
            return list(self._columns(database, str(args.get("measurement") or ""), "tags"))
        if command == "execute_query":
            return self._execute(database, str(args.get("query") or ""))
        raise BridgeError(f"Unknown command '{command}'.")

    def _tables(self, database: str) -> Mapping[str, Mapping[str, Sequence[str]]]:
        tables = self._schemas.get(database)
        if tables is None:
            raise BridgeError(f"Database '{database}' not found.")
        return tables

    def _columns(self, database: str, table: str, kind: str) -> Sequence[str]:
        tables = self._tables(database)
        if table not in tables:
            raise BridgeError(f"Measurement '{table}' not found in '{database}'.")
        return tuple(tables[table].get(kind, ()))

    def _execute(self, database: str, query: str) -> dict[str, object]:
        statement = query.strip().rstrip(";")
        upper = statement.upper()
        if upper == "SHOW MEASUREMENTS" or upper == "SHOW TABLES":
            return {"columns": ["name"], "data": [[name] for name in sorted(self._tables(database))]}
        if upper.startswith("SHOW DEVICES"):
            return {"data": [{"Device": name} for name in sorted(self._tables(database))]}
        match = re.match(r"SHOW\s+(FIELD|TAG)\s+KEYS\s+FROM\s+(.+)$", statement, re.IGNORECASE)
        if match:
            kind = "fields" if match.group(1).upper() == "FIELD" else "tags"
            table = match.group(2).strip().strip('"')
            key = "fieldKey" if kind == "fields" else "tagKey"
            return {"data": [{key: name} for name in self._columns(database, table, kind)]}
        match = re.match(r"SHOW\s+TIMESERIES\s+(.+?)\.\*$", statement, re.IGNORECASE)
        if match:
            table = match.group(1)
            names = self._columns(database, table, "fields")
            return {"data": [{"Timeseries": f"{table}.{name}"} for name in names]}
        LOG.debug("Demo bridge cannot answer query", extra={"query": query})
        raise BridgeError(f"Unsupported demo query: {query}")


__all__ = [
    "BackendBridge",
    "BridgeError",
    "DEMO_SCHEMAS",
    "DemoBridge",
    "HttpBridge",
]
