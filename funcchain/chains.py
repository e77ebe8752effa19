from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from .base import BaseChain, ChainData, default_error
from .helpers import resolve
from .http import HttpRequest, InvocationContext
from .results import HttpResponseInit, func_result
from .schema import BodySchema, as_schema, is_schema_factory

TBody = TypeVar("TBody")

HandlerResult = Union[HttpResponseInit, None]
HttpHandler = Callable[[HttpRequest, InvocationContext], Awaitable[HttpResponseInit]]
RegularHandler = Callable[[HttpRequest, InvocationContext], Union[HandlerResult, Awaitable[HandlerResult]]]
BodyHandler = Callable[[HttpRequest, Any, InvocationContext], Union[HandlerResult, Awaitable[HandlerResult]]]
SchemaFactory = Callable[[ChainData], Any]

INVALID_JSON_MESSAGE = "Request body is not valid JSON."


@dataclass(frozen=True)
class BodyChainData(ChainData, Generic[TBody]):
    body: TBody


class ParsedBodyChain(BaseChain[BodyChainData[TBody]]):
    """Chain whose links and handler see the parsed, validated request body.

    ``schema`` may be a pydantic model or type, a JSON schema dict, any
    object with ``safe_parse``, or a function of ``ChainData`` returning one
    of those (picked per request, e.g. from a header).
    """

    def __init__(self, schema: Any = None) -> None:
        super().__init__()
        if is_schema_factory(schema):
            self._schema_factory: SchemaFactory | None = schema
            self._schema: BodySchema | None = None
        else:
            self._schema_factory = None
            self._schema = as_schema(schema)

    def handle(self, handler: BodyHandler) -> HttpHandler:
        """Wrap ``handler(request, body, context)`` into a host entry point."""

        async def entry(request: HttpRequest, context: InvocationContext) -> HttpResponseInit:
            try:
                unknown_body = await request.json()
            except ValueError:
                context.error(INVALID_JSON_MESSAGE, f"Url: {request.url}")
                return func_result("BadRequest", INVALID_JSON_MESSAGE)

            try:
                schema = self._resolve_schema(ChainData(request, context))
            except Exception as exc:
                context.error(f"Body schema could not be resolved: {type(exc).__name__}: {exc}")
                return default_error("input_binding")

            if schema is None:
                body = unknown_body
            else:
                parsed = schema.safe_parse(unknown_body)
                if not parsed.success:
                    context.error("Invalid body", parsed.issues)
                    return func_result("BadRequest", parsed.issues)
                body = parsed.data

            failed_link_result = await self.execute_chain(BodyChainData(request, context, body))
            if failed_link_result is not None:
                return failed_link_result
            return await resolve(handler(request, body, context)) or func_result("OK")

        return entry

    def _resolve_schema(self, data: ChainData) -> BodySchema | None:
        if self._schema_factory is not None:
            return as_schema(self._schema_factory(data))
        return self._schema


class RegularChain(BaseChain[ChainData]):
    """Chain over the raw request; the usual starting point."""

    def parse_body(self, schema: Any = None) -> ParsedBodyChain[Any]:
        """Continue as a chain that parses the JSON body before any link runs.

        Links registered so far are carried over and run after parsing.
        """

        return ParsedBodyChain(schema).copy_from_chain(self, lambda data: data)

    def handle(self, handler: RegularHandler) -> HttpHandler:
        """Wrap ``handler(request, context)`` into a host entry point."""

        async def entry(request: HttpRequest, context: InvocationContext) -> HttpResponseInit:
            failed_link_result = await self.execute_chain(ChainData(request, context))
            if failed_link_result is not None:
                return failed_link_result
            return await resolve(handler(request, context)) or func_result("OK")

        return entry


def start_chain() -> RegularChain:
    """Start a new chain.

    Example::

        handler = (
            start_chain()
            .use_guard(header_flag_guard("x-internal"))
            .use_input_binding(lambda data: profiles.create(data.request.params["id"]))
            .handle(lambda request, context: func_result("OK", profiles.get(context)))
        )
    """

    return RegularChain()


__all__ = [
    "BodyChainData",
    "HttpHandler",
    "INVALID_JSON_MESSAGE",
    "ParsedBodyChain",
    "RegularChain",
    "start_chain",
]
