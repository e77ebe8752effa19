from __future__ import annotations

import hmac
from typing import Sequence

from ..helpers import get_header, get_header_array, get_header_flag
from ..results import func_result
from . import FunctionGuard, guard

DEFAULT_WRONG_HEADER_RESPONSE = func_result("Forbidden", "Missing or invalid header")


def header_guard(header_name: str, expected_value: str) -> FunctionGuard:
    """Pass when ``header_name`` is present with exactly ``expected_value``."""

    def check(request, context):
        value = get_header(request, header_name, optional=True)
        if value == expected_value:
            return True
        # The actual value is logged only, never echoed back.
        context.log(f"Header [{header_name}] has unexpected value. Expected: {expected_value}, Actual: {value}")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


def secret_header_guard(header_name: str, secret: str) -> FunctionGuard:
    """Like ``header_guard`` for credentials: constant-time compare, values never logged."""

    expected = secret.encode()

    def check(request, context):
        value = get_header(request, header_name, optional=True)
        if value is not None and hmac.compare_digest(value.encode(), expected):
            return True
        context.log(f"Header [{header_name}] is missing or does not match.")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


def header_flag_guard(header_name: str) -> FunctionGuard:
    """Pass when the flag header is present and not ``"false"``."""

    def check(request, context):
        if get_header_flag(request, header_name):
            return True
        context.error(f"Missing the flag [{header_name}] in the request headers.")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


def all_values_header_guard(header: str, values: Sequence[str], separator: str = ",") -> FunctionGuard:
    def check(request, context):
        present = get_header_array(request, header, separator)
        if all(value in present for value in values):
            return True
        context.error(f"Header {header} is missing required values: {', '.join(values)}")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


def exact_values_header_guard(header: str, values: Sequence[str], separator: str = ",") -> FunctionGuard:
    """Pass when the header holds exactly ``values``, in any order."""

    def check(request, context):
        present = get_header_array(request, header, separator)
        if len(present) == len(values) and all(value in present for value in values):
            return True
        context.error(f"Header {header} does not exactly match required values: {', '.join(values)}")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


def at_least_one_header_guard(header: str, values: Sequence[str], separator: str = ",") -> FunctionGuard:
    def check(request, context):
        present = get_header_array(request, header, separator)
        if any(value in present for value in values):
            return True
        context.error(f"Header {header} is missing at least one of the required values: {', '.join(values)}")
        return dict(DEFAULT_WRONG_HEADER_RESPONSE)

    return guard(check)


__all__ = [
    "DEFAULT_WRONG_HEADER_RESPONSE",
    "all_values_header_guard",
    "at_least_one_header_guard",
    "exact_values_header_guard",
    "header_flag_guard",
    "header_guard",
    "secret_header_guard",
]
