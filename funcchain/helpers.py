from __future__ import annotations

import inspect
from typing import Any, List

from .http import HttpRequest, InvocationContext


class MissingValueError(LookupError):
    """Raised when a required header or query parameter is absent."""


async def resolve(value: Any) -> Any:
    """Await ``value`` when it is awaitable, otherwise return it unchanged."""

    if inspect.isawaitable(value):
        return await value
    return value


def get_header(request: HttpRequest, key: str, optional: bool = False) -> str | None:
    """Read a header; a missing required header raises ``MissingValueError``."""

    value = request.headers.get(key)
    if value is not None or optional:
        return value
    raise MissingValueError(f"[{key}] header is required")


def get_header_flag(request: HttpRequest, key: str) -> bool:
    value = get_header(request, key, optional=True)
    return value is not None and value.lower() != "false"


def get_header_array(request: HttpRequest, key: str, separator: str = ",") -> List[str]:
    """Split a header into trimmed, non-empty items. A missing header yields ``[]``."""

    value = get_header(request, key, optional=True)
    if value is None:
        return []
    return [item.strip() for item in value.split(separator) if item.strip()]


def get_query(request: HttpRequest, key: str, optional: bool = False) -> str | None:
    """Read a query parameter; a missing required parameter raises ``MissingValueError``."""

    value = request.query.get(key)
    if value is not None or optional:
        return value
    raise MissingValueError(f"[{key}] query param is required")


def get_query_flag(request: HttpRequest, key: str) -> bool:
    value = get_query(request, key, optional=True)
    return value is not None and value.lower() != "false"


def get_input(context: InvocationContext, name: str) -> Any:
    return context.extra_inputs.get(name)


def get_input_item(context: InvocationContext, name: str, index: int = 0) -> Any:
    return get_input(context, name)[index]


__all__ = [
    "MissingValueError",
    "get_header",
    "get_header_array",
    "get_header_flag",
    "get_input",
    "get_input_item",
    "get_query",
    "get_query_flag",
    "resolve",
]
