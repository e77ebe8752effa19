from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping
from uuid import uuid4

from starlette.datastructures import Headers, QueryParams

from observability import get_logger


class HttpRequest:
    """Host request handed to chain entry points."""

    def __init__(
        self,
        url: str,
        method: str = "GET",
        *,
        headers: Mapping[str, str] | None = None,
        query: Mapping[str, str] | str | None = None,
        params: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> None:
        self.url = url
        self.method = method.upper()
        self.headers = Headers(headers=dict(headers or {}))
        self.query = QueryParams(query or {})
        self.params: Dict[str, str] = dict(params or {})
        self._body = body.encode("utf-8") if isinstance(body, str) else body

    async def text(self) -> str:
        return (self._body or b"").decode("utf-8")

    async def json(self) -> Any:
        """Parse the raw body as JSON; an empty or malformed body raises ``ValueError``."""

        return json.loads(await self.text())

    def __repr__(self) -> str:
        return f"HttpRequest(method={self.method!r}, url={self.url!r})"


class ExtraInputs:
    """Per-invocation keyed store shared by chain links and the handler."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values


class InvocationContext:
    """Per-invocation state plus the host logging sink."""

    def __init__(
        self,
        invocation_id: str | None = None,
        function_name: str = "",
        logger: logging.Logger | None = None,
    ) -> None:
        self.invocation_id = invocation_id or uuid4().hex
        self.function_name = function_name
        self.extra_inputs = ExtraInputs()
        self._logger = logger

    def log(self, *args: Any) -> None:
        self._emit(logging.INFO, "invocation.log", args)

    def warn(self, *args: Any) -> None:
        self._emit(logging.WARNING, "invocation.warn", args)

    def error(self, *args: Any) -> None:
        self._emit(logging.ERROR, "invocation.error", args)

    def _emit(self, level: int, event: str, args: tuple[Any, ...]) -> None:
        logger = self._logger or get_logger()
        message = " ".join(_stringify(arg) for arg in args)
        logger.log(
            level,
            message,
            extra={
                "event": event,
                "fields": {
                    "invocation_id": self.invocation_id,
                    "function_name": self.function_name,
                },
            },
        )


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except (TypeError, ValueError):
        return repr(value)


__all__ = ["ExtraInputs", "HttpRequest", "InvocationContext"]
