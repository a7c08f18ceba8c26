"""Explicit caller context passed into every workflow call."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field


class Role(str, enum.Enum):
    """Surface an action is issued from."""

    ADMIN = "admin"
    VENDOR = "vendor"


class CallerContext(BaseModel):
    """Authenticated caller: id, role and granted capabilities.

    Built by the HTTP layer from trusted gateway headers; the workflow never
    reads identity or permissions from anywhere else.
    """

    caller_id: str
    role: Role
    capabilities: frozenset[str] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def has_capability(self, name: str) -> bool:
        return name in self.capabilities
