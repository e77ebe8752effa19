from __future__ import annotations

from typing import Union

from ..inputs import InputFactory
from ..results import HttpResponseInit, func_result
from . import FunctionGuard, guard


def _not_found(name: str) -> HttpResponseInit:
    return func_result("NotFound", f"No data found for [{name}].")


def validate_input_exists_guard(
    source: Union[str, InputFactory],
    fail_on_empty_list: bool = True,
) -> FunctionGuard:
    """Fail with ``NotFound`` when a staged input is missing.

    ``source`` is either a raw ``extra_inputs`` key or an input factory, in
    which case its default binding is checked. Only ``None`` counts as
    missing, plus an empty list when ``fail_on_empty_list`` is set.
    """

    name = source.key if isinstance(source, InputFactory) else source

    def check(request, context):
        del request  # unused
        if isinstance(source, InputFactory):
            value = source.get(context)
        else:
            value = context.extra_inputs.get(source)
        if value is None:
            return _not_found(name)
        if fail_on_empty_list and isinstance(value, list) and not value:
            return _not_found(name)
        return True

    return guard(check)


__all__ = ["validate_input_exists_guard"]
