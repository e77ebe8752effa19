from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List

from funcchain import input_factory

DEFAULT_API_KEY = "local-dev-key"
DEFAULT_ALLOWED_ROLES = "member,admin"


@lru_cache(maxsize=1)
def get_settings() -> Dict[str, Any]:
    return {
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "api_key": os.environ.get("FUNCCHAIN_API_KEY", DEFAULT_API_KEY),
        "allowed_roles": _split(os.environ.get("FUNCCHAIN_ALLOWED_ROLES", DEFAULT_ALLOWED_ROLES)),
    }


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass(frozen=True)
class Member:
    id: str
    name: str
    age: int
    role: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "age": self.age, "role": self.role}


class MemberDirectory:
    """In-memory member store standing in for a remote lookup."""

    def __init__(self) -> None:
        self._members: Dict[str, Member] = {}

    async def find(self, member_id: str) -> Member | None:
        return self._members.get(member_id)

    async def add(self, name: str, age: int, role: str) -> Member:
        member = Member(id=f"M-{len(self._members) + 1}", name=name, age=age, role=role)
        self._members[member.id] = member
        return member

    def seed(self, *members: Member) -> None:
        for member in members:
            self._members[member.id] = member


@lru_cache(maxsize=1)
def get_member_directory() -> MemberDirectory:
    return MemberDirectory()


async def _fetch_member(member_id: str) -> Member | None:
    return await get_member_directory().find(member_id)


async def _upper_case(text: str) -> str:
    return text.upper()


member_input = input_factory("member", _fetch_member)
upper_case_input = input_factory("upperCase", _upper_case)


__all__ = [
    "DEFAULT_API_KEY",
    "DEFAULT_ALLOWED_ROLES",
    "Member",
    "MemberDirectory",
    "get_member_directory",
    "get_settings",
    "member_input",
    "upper_case_input",
]
