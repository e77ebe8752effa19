from __future__ import annotations

from typing import List

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.deps import get_member_directory, get_settings, member_input
from app.host import chain_endpoint
from funcchain import (
    Guard,
    func_result,
    guard,
    header_flag_guard,
    input_factory,
    secret_header_guard,
    start_chain,
    validate_input_exists_guard,
)
from funcchain.base import ChainData
from funcchain.chains import BodyChainData

router = APIRouter(prefix="/api/members", tags=["members"])


class MemberIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    age: int = Field(..., ge=18)
    role: str = Field(default="member")


async def _display_name(name: str) -> str:
    return " ".join(part.capitalize() for part in name.split())


display_name_input = input_factory("displayName", _display_name)


def access_guards(data: ChainData) -> List[Guard]:
    del data  # unused
    return [secret_header_guard("x-api-key", get_settings()["api_key"]), header_flag_guard("x-internal")]


def role_guard(data: BodyChainData[MemberIn]) -> Guard:
    allowed = get_settings()["allowed_roles"]

    def check(request, context):
        if data.body.role in allowed:
            return True
        return func_result("Forbidden", {"message": "Role is not allowed.", "role": data.body.role})

    return guard(check)


async def create_member(request, body: MemberIn, context):
    member = await get_member_directory().add(display_name_input.get(context), body.age, body.role)
    context.log(f"Created member {member.id}")
    return func_result("Created", member.to_dict())


authorized = start_chain().use_any_guard(access_guards)

get_member = (
    start_chain()
    .copy_from_chain(authorized, lambda data: data)
    .use_input_binding(lambda data: member_input.create(data.request.params["member_id"]))
    .use_guard(validate_input_exists_guard(member_input))
    .handle(lambda request, context: func_result("OK", member_input.get(context).to_dict()))
)

post_member = (
    start_chain()
    .use_any_guard(access_guards)
    .parse_body(MemberIn)
    .use_guard(role_guard)
    .use_input_binding(lambda data: display_name_input.create(data.body.name))
    .handle(create_member)
)

router.add_api_route("/{member_id}", chain_endpoint(get_member, "get_member"), methods=["GET"])
router.add_api_route("", chain_endpoint(post_member, "post_member"), methods=["POST"])


__all__ = ["MemberIn", "access_guards", "display_name_input", "role_guard", "router"]
