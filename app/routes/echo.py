from __future__ import annotations

from fastapi import APIRouter

from app.deps import upper_case_input
from app.host import chain_endpoint
from funcchain import func_result, get_query, start_chain

router = APIRouter(prefix="/api", tags=["echo"])

echo = (
    start_chain()
    .use_input_binding(lambda data: upper_case_input.create(get_query(data.request, "text")))
    .handle(lambda request, context: func_result("OK", upper_case_input.get(context)))
)

router.add_api_route("/echo", chain_endpoint(echo, "echo"), methods=["GET"])


__all__ = ["router", "echo"]
