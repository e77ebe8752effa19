from __future__ import annotations

from typing import Iterable
from unittest.mock import Mock

import pytest

from funcchain import HttpRequest, InvocationContext
from observability import get_metrics


@pytest.fixture(autouse=True)
def reset_metrics() -> Iterable[None]:
    metrics = get_metrics()
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def http_request() -> HttpRequest:
    return HttpRequest("https://example.com/api/test")


@pytest.fixture
def context() -> InvocationContext:
    ctx = InvocationContext(invocation_id="inv-1", function_name="test")
    ctx.error = Mock()  # type: ignore[method-assign]
    ctx.log = Mock()  # type: ignore[method-assign]
    return ctx

