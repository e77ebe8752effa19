from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol, runtime_checkable

import jsonschema
from jsonschema.validators import validator_for
from pydantic import PydanticUserError, TypeAdapter, ValidationError


class SchemaError(ValueError):
    """Raised when an object cannot be used as a body schema."""


@dataclass(frozen=True)
class SchemaResult:
    success: bool
    data: Any = None
    issues: List[Dict[str, Any]] = field(default_factory=list)


@runtime_checkable
class BodySchema(Protocol):
    def safe_parse(self, value: Any) -> SchemaResult:
        ...


class PydanticSchema:
    """Validates with a pydantic ``TypeAdapter`` and returns the typed value."""

    def __init__(self, model: Any) -> None:
        try:
            self._adapter: TypeAdapter[Any] = TypeAdapter(model)
        except PydanticUserError as exc:
            raise SchemaError(f"Unsupported pydantic schema: {model!r}") from exc
        self.model = model

    def safe_parse(self, value: Any) -> SchemaResult:
        try:
            data = self._adapter.validate_python(value)
        except ValidationError as exc:
            issues = [
                {"code": error["type"], "path": list(error["loc"]), "message": error["msg"]}
                for error in exc.errors(include_url=False, include_context=False, include_input=False)
            ]
            return SchemaResult(success=False, issues=issues)
        return SchemaResult(success=True, data=data)


class JsonSchema:
    """Validates with ``jsonschema``; the parsed value is returned unchanged."""

    def __init__(self, schema: Mapping[str, Any]) -> None:
        validator_cls = validator_for(schema)
        try:
            validator_cls.check_schema(schema)
        except jsonschema.SchemaError as exc:
            raise SchemaError(f"Invalid JSON schema: {exc.message}") from exc
        self.schema = schema
        self._validator = validator_cls(schema)

    def safe_parse(self, value: Any) -> SchemaResult:
        errors = sorted(self._validator.iter_errors(value), key=lambda err: [str(part) for part in err.absolute_path])
        if not errors:
            return SchemaResult(success=True, data=value)
        issues = [
            {"code": error.validator, "path": list(error.absolute_path), "message": error.message}
            for error in errors
        ]
        return SchemaResult(success=False, issues=issues)


def is_schema_factory(value: Any) -> bool:
    """Plain functions of chain data are factories; models and aliases are schemas."""

    return inspect.isfunction(value) or inspect.ismethod(value) or isinstance(value, functools.partial)


def as_schema(value: Any) -> BodySchema | None:
    if value is None:
        return None
    if isinstance(value, BodySchema) and not isinstance(value, type):
        return value
    if isinstance(value, Mapping):
        return JsonSchema(value)
    return PydanticSchema(value)


__all__ = [
    "BodySchema",
    "JsonSchema",
    "PydanticSchema",
    "SchemaError",
    "SchemaResult",
    "as_schema",
    "is_schema_factory",
]
