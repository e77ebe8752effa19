from __future__ import annotations

import asyncio
import json
from typing import Any, List
from unittest.mock import AsyncMock, Mock

import pytest

from funcchain import (
    DEFAULT_ERRORS,
    BaseChain,
    ChainData,
    HttpRequest,
    InvocationContext,
    func_result,
    guard,
    input_factory,
)
from observability import get_metrics


class ChainUnderTest(BaseChain[ChainData]):
    async def run(self, request: HttpRequest, context: InvocationContext):
        return await self.execute_chain(ChainData(request, context))


def upper_case_input():
    return input_factory("test", AsyncMock(side_effect=lambda value: value.upper()))


def test_registration_is_fluent() -> None:
    chain = ChainUnderTest()
    test_input = upper_case_input()

    assert chain.use_guard(guard(lambda r, c: True)) is chain
    assert chain.use_guard(lambda data: guard(lambda r, c: True)) is chain
    assert chain.use_input_binding(test_input.create("x")) is chain
    assert chain.use_input_binding(lambda data: test_input.create("x")) is chain
    assert [link.type for link in chain.links] == ["guard", "guard", "input_binding", "input_binding"]


def test_registration_stores_factories_without_running_them() -> None:
    check = Mock(return_value=True)
    chain = ChainUnderTest().use_guard(guard(check))
    link = chain.links[0]
    assert callable(link.factory)
    check.assert_not_called()


def test_registration_rejects_non_links() -> None:
    with pytest.raises(TypeError):
        ChainUnderTest().use_guard("not a guard")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        ChainUnderTest().use_input_binding(42)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_all_links_pass(http_request, context) -> None:
    test_input = upper_case_input()
    chain = ChainUnderTest().use_guard(guard(lambda r, c: True)).use_input_binding(test_input.create("test-data"))

    result = await chain.run(http_request, context)

    assert result is None
    assert test_input.get(context) == "TEST-DATA"
    context.error.assert_not_called()


@pytest.mark.asyncio
async def test_guard_false_stops_with_default_error(http_request, context) -> None:
    passing = Mock(return_value=True)
    failing = Mock(return_value=False)
    never = Mock(return_value=True)
    chain = ChainUnderTest().use_guard(guard(passing)).use_guard(guard(failing)).use_guard(guard(never))

    result = await chain.run(http_request, context)

    assert result == func_result("Forbidden", "I'm sorry, kiddo. I really am.")
    passing.assert_called_once_with(http_request, context)
    failing.assert_called_once_with(http_request, context)
    never.assert_not_called()
    context.error.assert_called_once()
    message = context.error.call_args.args[0]
    assert message.startswith("Link #1 stopped the chain.")
    assert f"Url: {http_request.url}" in message
    assert json.dumps(result) in message


@pytest.mark.asyncio
async def test_guard_custom_response_is_returned_verbatim(http_request, context) -> None:
    custom = func_result("Forbidden", "Custom error message")
    never = Mock(return_value=True)
    chain = ChainUnderTest().use_guard(guard(lambda r, c: custom)).use_guard(guard(never))

    result = await chain.run(http_request, context)

    assert result is custom
    never.assert_not_called()
    context.error.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("outcome", [None, 0, "yes", {"body": "no status"}, 1])
async def test_unrecognized_outcomes_use_default_error(http_request, context, outcome: Any) -> None:
    chain = ChainUnderTest().use_guard(guard(lambda r, c: outcome))
    assert await chain.run(http_request, context) == DEFAULT_ERRORS["guard"]


@pytest.mark.asyncio
async def test_async_guards_are_awaited(http_request, context) -> None:
    check = AsyncMock(return_value=func_result("Unauthorized"))
    chain = ChainUnderTest().use_guard(guard(check))
    assert await chain.run(http_request, context) == {"status": 401}
    check.assert_awaited_once()


@pytest.mark.asyncio
async def test_input_binding_fault_becomes_default_error(http_request, context) -> None:
    failing = input_factory("test", AsyncMock(side_effect=RuntimeError("Failed to fetch data")))
    chain = ChainUnderTest().use_guard(guard(lambda r, c: True)).use_input_binding(failing.create("test-data"))

    result = await chain.run(http_request, context)

    assert result == func_result("InternalServerError", "There is no spoon")
    messages = [call.args[0] for call in context.error.call_args_list]
    assert messages[0] == "Link #1 raised RuntimeError: Failed to fetch data"
    assert messages[1].startswith("Link #1 stopped the chain.")


@pytest.mark.asyncio
async def test_input_binding_false_uses_binding_default(http_request, context) -> None:
    class RefusingBinding:
        def set(self, ctx):
            return False

    result = await ChainUnderTest().use_input_binding(RefusingBinding()).run(http_request, context)
    assert result == DEFAULT_ERRORS["input_binding"]


@pytest.mark.asyncio
async def test_guard_fault_and_factory_fault_use_guard_default(http_request, context) -> None:
    def raising_check(request, ctx):
        raise KeyError("x-api-key")

    def raising_factory(data):
        raise ValueError("no guard today")

    assert await ChainUnderTest().use_guard(guard(raising_check)).run(http_request, context) == DEFAULT_ERRORS["guard"]
    assert await ChainUnderTest().use_guard(raising_factory).run(http_request, context) == DEFAULT_ERRORS["guard"]


@pytest.mark.asyncio
async def test_default_errors_are_not_shared(http_request, context) -> None:
    result = await ChainUnderTest().use_guard(guard(lambda r, c: False)).run(http_request, context)
    result["body"] = "mutated"
    assert DEFAULT_ERRORS["guard"]["body"] == "I'm sorry, kiddo. I really am."


@pytest.mark.asyncio
async def test_factories_receive_chain_data(http_request, context) -> None:
    seen: List[ChainData] = []

    def factory(data: ChainData):
        seen.append(data)
        return guard(lambda r, c: True)

    await ChainUnderTest().use_guard(factory).run(http_request, context)

    assert seen == [ChainData(http_request, context)]


@pytest.mark.asyncio
async def test_bindings_are_visible_to_later_links(http_request, context) -> None:
    test_input = upper_case_input()
    chain = (
        ChainUnderTest()
        .use_input_binding(test_input.create("staged"))
        .use_guard(lambda data: guard(lambda r, c: test_input.get(c) == "STAGED"))
    )
    assert await chain.run(http_request, context) is None


@pytest.mark.asyncio
async def test_copy_from_chain_appends_mapped_links(http_request, context) -> None:
    calls: List[str] = []
    source = (
        ChainUnderTest()
        .use_guard(guard(lambda r, c: calls.append("source-guard") or True))
        .use_input_binding(input_factory("test", AsyncMock(side_effect=str.upper)).create("source"))
    )
    target = ChainUnderTest().use_guard(guard(lambda r, c: calls.append("target-guard") or True))
    map_func = Mock(side_effect=lambda data: data)

    result = target.copy_from_chain(source, map_func)
    await target.run(http_request, context)

    assert result is target
    assert calls == ["target-guard", "source-guard"]
    assert map_func.call_count == 2
    assert context.extra_inputs.get("test-default") == "SOURCE"
    assert len(source.links) == 2
    assert len(target.links) == 3


@pytest.mark.asyncio
async def test_copy_from_chain_leaves_source_untouched(http_request, context) -> None:
    source_check = Mock(return_value=True)
    source = ChainUnderTest().use_guard(guard(source_check))
    target = ChainUnderTest().copy_from_chain(source, lambda data: data).use_guard(guard(lambda r, c: False))

    assert await source.run(http_request, context) is None
    assert await target.run(http_request, context) == DEFAULT_ERRORS["guard"]
    assert len(source.links) == 1
    assert source_check.call_count == 2


@pytest.mark.asyncio
async def test_copy_from_chain_map_func_shapes_source_data(http_request, context) -> None:
    seen: List[Any] = []
    source = ChainUnderTest().use_guard(lambda data: seen.append(data) or guard(lambda r, c: True))
    target = ChainUnderTest().copy_from_chain(source, lambda data: ChainData(data.request, InvocationContext("mapped")))

    await target.run(http_request, context)

    assert seen[0].context.invocation_id == "mapped"


@pytest.mark.asyncio
async def test_concurrent_invocations_share_the_chain() -> None:
    test_input = input_factory("id", lambda value: value)

    async def slow_guard(request, ctx):
        await asyncio.sleep(0)
        return test_input.get(ctx) == request.params["id"]

    chain = (
        ChainUnderTest()
        .use_input_binding(lambda data: test_input.create(data.request.params["id"]))
        .use_guard(guard(slow_guard))
    )
    requests = [HttpRequest("https://example.com", params={"id": str(i)}) for i in range(10)]
    contexts = [InvocationContext() for _ in requests]

    results = await asyncio.gather(*(chain.run(r, c) for r, c in zip(requests, contexts)))

    assert results == [None] * 10
    assert [test_input.get(c) for c in contexts] == [str(i) for i in range(10)]


@pytest.mark.asyncio
async def test_stops_are_counted(http_request, context) -> None:
    await ChainUnderTest().use_guard(guard(lambda r, c: False)).run(http_request, context)
    await ChainUnderTest().use_guard(guard(lambda r, c: False)).run(http_request, context)

    assert get_metrics().snapshot()["chain_stops"] == [{"link_type": "guard", "status": 403, "count": 2}]
