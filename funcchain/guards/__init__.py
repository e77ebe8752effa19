from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Protocol, Union, runtime_checkable

from ..helpers import resolve
from ..http import HttpRequest, InvocationContext
from ..results import HttpResponseInit, func_result

ChainLinkResult = Union[bool, HttpResponseInit]
CheckFunc = Callable[
    [HttpRequest, InvocationContext],
    Union[ChainLinkResult, Awaitable[ChainLinkResult]],
]

ANY_GUARD_FAILURE_MESSAGE = "None of the guards in the link passed."


@runtime_checkable
class Guard(Protocol):
    """Gate evaluated against the request and the invocation context.

    ``check`` returns ``True`` to pass, ``False`` to fail with the default
    error, or a response dict to fail with that response. It may be a
    coroutine function.
    """

    def check(self, request: HttpRequest, context: InvocationContext) -> Any:
        ...


@dataclass(frozen=True)
class FunctionGuard:
    """Guard backed by a plain check function."""

    check: CheckFunc


def guard(check: CheckFunc) -> FunctionGuard:
    return FunctionGuard(check)


def any_guard(*guards: Guard) -> FunctionGuard:
    """Combine guards so the link passes as soon as one of them passes.

    Guards are awaited one after another in the given order; later guards
    never run once one has passed. When every guard fails, the response
    carries each raw outcome in order under ``results``.
    """

    if not guards:
        raise ValueError("any_guard requires at least one guard")
    members: List[Guard] = list(guards)

    async def check(request: HttpRequest, context: InvocationContext) -> ChainLinkResult:
        results: List[Any] = []
        for member in members:
            result = await resolve(member.check(request, context))
            if result is True:
                return True
            results.append(result)
        return func_result("Forbidden", {"message": ANY_GUARD_FAILURE_MESSAGE, "results": results})

    return guard(check)


def is_guard(value: Any) -> bool:
    return isinstance(value, Guard)


__all__ = [
    "ANY_GUARD_FAILURE_MESSAGE",
    "ChainLinkResult",
    "CheckFunc",
    "FunctionGuard",
    "Guard",
    "any_guard",
    "guard",
    "is_guard",
]
