from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from funcchain import HttpRequest, InvocationContext
from funcchain.chains import HttpHandler

Endpoint = Callable[[Request], Awaitable[Response]]


async def to_http_request(request: Request) -> HttpRequest:
    return HttpRequest(
        str(request.url),
        request.method,
        headers=dict(request.headers),
        query=str(request.query_params),
        params=dict(request.path_params),
        body=await request.body(),
    )


def to_response(result: Mapping[str, Any]) -> Response:
    status = int(result["status"])
    headers = dict(result.get("headers") or {})
    if "json_body" in result:
        return JSONResponse(jsonable_encoder(result["json_body"]), status_code=status, headers=headers)
    if "body" in result:
        return PlainTextResponse(result["body"], status_code=status, headers=headers)
    return Response(status_code=status, headers=headers)


def chain_endpoint(handler: HttpHandler, function_name: str) -> Endpoint:
    """Expose a chain entry point as a FastAPI endpoint with a fresh context per call."""

    async def endpoint(request: Request) -> Response:
        context = InvocationContext(function_name=function_name)
        result = await handler(await to_http_request(request), context)
        return to_response(result)

    endpoint.__name__ = function_name
    return endpoint


__all__ = ["chain_endpoint", "to_http_request", "to_response"]
