from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Protocol, TypeVar, Union, runtime_checkable

from .helpers import resolve
from .http import InvocationContext

TArgs = TypeVar("TArgs")
TResult = TypeVar("TResult")

DEFAULT_INPUT_NAME = "default"

FetchFunc = Callable[[TArgs], Union[Awaitable[TResult], TResult]]


@runtime_checkable
class InputBindingSetter(Protocol):
    """Link that stages a value in ``context.extra_inputs``.

    ``set`` returns ``True`` on success, ``False`` or a response dict on
    failure, like a guard check.
    """

    def set(self, context: InvocationContext) -> Any:
        ...


def storage_key(key: str, name: str) -> str:
    return f"{key}-{name}"


@dataclass(frozen=True)
class InputBinding(Generic[TArgs, TResult]):
    """A fetch bound to concrete arguments and a storage slot."""

    key: str
    name: str
    args: TArgs
    fetch: FetchFunc

    async def set(self, context: InvocationContext) -> bool:
        data = await resolve(self.fetch(self.args))
        context.extra_inputs.set(storage_key(self.key, self.name), data)
        return True

    def get(self, context: InvocationContext) -> TResult:
        return context.extra_inputs.get(storage_key(self.key, self.name))


class InputFactory(Generic[TArgs, TResult]):
    """Owns one key and builds bindings that store under it.

    Every binding is named; the unnamed variants use ``DEFAULT_INPUT_NAME``,
    so ``create(args)`` stores under ``f"{key}-default"``.
    """

    def __init__(self, key: str, fetch: FetchFunc) -> None:
        self._key = key
        self._fetch = fetch

    @property
    def key(self) -> str:
        return self._key

    def create(self, args: TArgs) -> InputBinding[TArgs, TResult]:
        return self.create_named(args, DEFAULT_INPUT_NAME)

    def create_named(self, args: TArgs, name: str) -> InputBinding[TArgs, TResult]:
        return InputBinding(key=self._key, name=name, args=args, fetch=self._fetch)

    def get(self, context: InvocationContext) -> TResult:
        return self.get_named(context, DEFAULT_INPUT_NAME)

    def get_named(self, context: InvocationContext, name: str) -> TResult:
        return context.extra_inputs.get(storage_key(self._key, name))


def input_factory(key: str, fetch: FetchFunc) -> InputFactory[Any, Any]:
    """Create an input factory for ``key`` whose bindings call ``fetch(args)``.

    Example::

        upper_case = input_factory("upper_case", to_upper)

        handler = (
            start_chain()
            .use_input_binding(lambda data: upper_case.create(get_query(data.request, "text")))
            .handle(lambda request, context: func_result("OK", upper_case.get(context)))
        )
    """

    return InputFactory(key, fetch)


__all__ = [
    "DEFAULT_INPUT_NAME",
    "InputBinding",
    "InputBindingSetter",
    "InputFactory",
    "input_factory",
    "storage_key",
]
