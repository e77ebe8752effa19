from __future__ import annotations

from .base import DEFAULT_ERRORS, BaseChain, ChainData, ChainLink
from .chains import BodyChainData, ParsedBodyChain, RegularChain, start_chain
from .guards import ANY_GUARD_FAILURE_MESSAGE, FunctionGuard, Guard, any_guard, guard
from .guards.header import (
    DEFAULT_WRONG_HEADER_RESPONSE,
    all_values_header_guard,
    at_least_one_header_guard,
    exact_values_header_guard,
    header_flag_guard,
    header_guard,
    secret_header_guard,
)
from .guards.input_exists import validate_input_exists_guard
from .helpers import (
    MissingValueError,
    get_header,
    get_header_array,
    get_header_flag,
    get_input,
    get_input_item,
    get_query,
    get_query_flag,
)
from .http import ExtraInputs, HttpRequest, InvocationContext
from .inputs import DEFAULT_INPUT_NAME, InputBinding, InputBindingSetter, InputFactory, input_factory
from .results import HTTP_STATUS_CODES, HttpResponseInit, func_result, is_response
from .schema import BodySchema, JsonSchema, PydanticSchema, SchemaError, SchemaResult

__all__ = [
    "ANY_GUARD_FAILURE_MESSAGE",
    "BaseChain",
    "BodyChainData",
    "BodySchema",
    "ChainData",
    "ChainLink",
    "DEFAULT_ERRORS",
    "DEFAULT_INPUT_NAME",
    "DEFAULT_WRONG_HEADER_RESPONSE",
    "ExtraInputs",
    "FunctionGuard",
    "Guard",
    "HTTP_STATUS_CODES",
    "HttpRequest",
    "HttpResponseInit",
    "InputBinding",
    "InputBindingSetter",
    "InputFactory",
    "InvocationContext",
    "JsonSchema",
    "MissingValueError",
    "ParsedBodyChain",
    "PydanticSchema",
    "RegularChain",
    "SchemaError",
    "SchemaResult",
    "all_values_header_guard",
    "any_guard",
    "at_least_one_header_guard",
    "exact_values_header_guard",
    "func_result",
    "get_header",
    "get_header_array",
    "get_header_flag",
    "get_input",
    "get_input_item",
    "get_query",
    "get_query_flag",
    "guard",
    "header_flag_guard",
    "header_guard",
    "input_factory",
    "is_response",
    "secret_header_guard",
    "start_chain",
    "validate_input_exists_guard",
]
