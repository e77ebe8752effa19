from __future__ import annotations

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, List, Literal, Mapping, Sequence, Tuple, TypeVar, Union

from observability import get_metrics

from .guards import ChainLinkResult, Guard, any_guard, is_guard
from .helpers import resolve
from .http import HttpRequest, InvocationContext
from .inputs import InputBindingSetter
from .results import HttpResponseInit, func_result, is_response


@dataclass(frozen=True)
class ChainData:
    """Per-invocation data handed to link factories."""

    request: HttpRequest
    context: InvocationContext


TChainData = TypeVar("TChainData", bound=ChainData)
TSourceData = TypeVar("TSourceData", bound=ChainData)

LinkType = Literal["guard", "input_binding"]
LinkFactory = Callable[[Any], Any]

DEFAULT_ERRORS: Mapping[str, HttpResponseInit] = MappingProxyType(
    {
        "guard": func_result("Forbidden", "I'm sorry, kiddo. I really am."),
        "input_binding": func_result("InternalServerError", "There is no spoon"),
    }
)


def default_error(link_type: str) -> HttpResponseInit:
    return dict(DEFAULT_ERRORS[link_type])  # type: ignore[return-value]


@dataclass(frozen=True)
class ChainLink:
    """One step of a chain: a guard or input binding built from chain data."""

    type: LinkType
    factory: LinkFactory


def _constant(value: Any) -> LinkFactory:
    return lambda data: value


def _compose(factory: LinkFactory, map_func: Callable[[Any], Any]) -> LinkFactory:
    return lambda data: factory(map_func(data))


class BaseChain(Generic[TChainData]):
    """Ordered guards and input bindings run before a handler.

    Links are appended while the chain is configured and only read while
    requests are served, so one chain can serve overlapping invocations.
    """

    def __init__(self) -> None:
        self._links: List[ChainLink] = []

    @property
    def links(self) -> Tuple[ChainLink, ...]:
        return tuple(self._links)

    def use_guard(self, guard: Union[Guard, Callable[[TChainData], Guard]]):
        """Append a guard, or a function of chain data returning one."""

        self._links.append(ChainLink("guard", self._as_factory(guard, is_guard)))
        return self

    def use_any_guard(self, *guards: Union[Guard, Callable[[TChainData], Sequence[Guard]]]):
        """Append one guard link that passes when any of ``guards`` passes.

        Accepts guard instances, or a single function of chain data
        returning the guards at invocation time.
        """

        if not guards:
            raise ValueError("use_any_guard requires at least one guard")
        if len(guards) == 1 and not is_guard(guards[0]):
            guards_factory = self._as_factory(guards[0], is_guard)
            self._links.append(ChainLink("guard", lambda data: any_guard(*guards_factory(data))))
            return self
        for candidate in guards:
            if not is_guard(candidate):
                raise TypeError(f"Expected a guard, got {candidate!r}")
        combined = any_guard(*guards)  # type: ignore[arg-type]
        self._links.append(ChainLink("guard", _constant(combined)))
        return self

    def use_input_binding(self, binding: Union[InputBindingSetter, Callable[[TChainData], InputBindingSetter]]):
        """Append an input binding, or a function of chain data returning one."""

        self._links.append(ChainLink("input_binding", self._as_factory(binding, _is_binding)))
        return self

    def copy_from_chain(self, source: "BaseChain[TSourceData]", map_func: Callable[[TChainData], TSourceData]):
        """Append every link of ``source`` with its factory reading ``map_func(data)``.

        ``source`` is left untouched.
        """

        self._links.extend(ChainLink(link.type, _compose(link.factory, map_func)) for link in source.links)
        return self

    async def execute_chain(self, data: TChainData) -> HttpResponseInit | None:
        """Run links in order; return the first failure response or ``None``."""

        request, context = data.request, data.context
        for index, link in enumerate(self.links):
            try:
                outcome = await self._run_link(link, data)
            except Exception as exc:
                context.error(f"Link #{index} raised {type(exc).__name__}: {exc}")
                outcome = False

            if outcome is True:
                continue

            link_error = outcome if is_response(outcome) else default_error(link.type)
            context.error(
                f"Link #{index} stopped the chain. Url: {request.url} | Result: {json.dumps(link_error, default=str)}"
            )
            get_metrics().record_chain_stop(link.type, link_error["status"])
            return link_error

        return None

    async def _run_link(self, link: ChainLink, data: TChainData) -> ChainLinkResult:
        instance = link.factory(data)
        if link.type == "guard":
            return await resolve(instance.check(data.request, data.context))
        return await resolve(instance.set(data.context))

    @staticmethod
    def _as_factory(value: Any, is_instance: Callable[[Any], bool]) -> LinkFactory:
        if is_instance(value):
            return _constant(value)
        if callable(value):
            return value
        raise TypeError(f"Expected a link instance or a factory function, got {value!r}")


def _is_binding(value: Any) -> bool:
    return isinstance(value, InputBindingSetter)


__all__ = [
    "BaseChain",
    "ChainData",
    "ChainLink",
    "DEFAULT_ERRORS",
    "LinkType",
    "default_error",
]
