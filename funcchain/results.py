from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, TypedDict

# Standard HTTP status registry, https://developer.mozilla.org/en-US/docs/Web/HTTP/Status
HTTP_STATUS_CODES: Mapping[str, int] = MappingProxyType(
    {
        "OK": 200,
        "Created": 201,
        "Accepted": 202,
        "NoContent": 204,
        "MovedPermanently": 301,
        "Found": 302,
        "SeeOther": 303,
        "NotModified": 304,
        "TemporaryRedirect": 307,
        "PermanentRedirect": 308,
        "BadRequest": 400,
        "Unauthorized": 401,
        "Forbidden": 403,
        "NotFound": 404,
        "MethodNotAllowed": 405,
        "NotAcceptable": 406,
        "ProxyAuthenticationRequired": 407,
        "RequestTimeout": 408,
        "Conflict": 409,
        "Gone": 410,
        "LengthRequired": 411,
        "PreconditionFailed": 412,
        "PayloadTooLarge": 413,
        "URITooLong": 414,
        "UnsupportedMediaType": 415,
        "RangeNotSatisfiable": 416,
        "ExpectationFailed": 417,
        "ImATeapot": 418,
        "MisdirectedRequest": 421,
        "UnprocessableEntity": 422,
        "Locked": 423,
        "FailedDependency": 424,
        "TooEarly": 425,
        "UpgradeRequired": 426,
        "PreconditionRequired": 428,
        "TooManyRequests": 429,
        "RequestHeaderFieldsTooLarge": 431,
        "UnavailableForLegalReasons": 451,
        "InternalServerError": 500,
        "NotImplemented": 501,
        "BadGateway": 502,
        "ServiceUnavailable": 503,
        "GatewayTimeout": 504,
        "HTTPVersionNotSupported": 505,
        "VariantAlsoNegotiates": 506,
        "InsufficientStorage": 507,
        "LoopDetected": 508,
        "NotExtended": 510,
        "NetworkAuthenticationRequired": 511,
    }
)


class HttpResponseInit(TypedDict, total=False):
    status: int
    body: str
    json_body: Any
    headers: Dict[str, str]


def func_result(status: str, message: Any = None) -> HttpResponseInit:
    """Build a host response from a status name and an optional message.

    A string message becomes ``body``; any other non-empty message becomes
    ``json_body``. Unknown status names raise ``KeyError``.
    """

    code = HTTP_STATUS_CODES[status]
    if _is_empty(message):
        return {"status": code}
    if isinstance(message, str):
        return {"status": code, "body": message}
    return {"status": code, "json_body": message}


def _is_empty(message: Any) -> bool:
    if message is None:
        return True
    if isinstance(message, (str, bool, int, float)):
        return not message
    return False


def is_response(value: Any) -> bool:
    """True when ``value`` is a structured response (a mapping with an int status)."""

    if not isinstance(value, Mapping):
        return False
    status = value.get("status")
    return isinstance(status, int) and not isinstance(status, bool)


__all__ = ["HTTP_STATUS_CODES", "HttpResponseInit", "func_result", "is_response"]
