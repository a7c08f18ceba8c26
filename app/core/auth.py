"""Caller identity dependencies.

Authentication happens upstream (identity provider + API gateway). The
gateway forwards the verified identity in these headers:

  X-Caller-Id            — authenticated user id
  X-Caller-Role          — "admin" | "vendor"
  X-Caller-Capabilities  — comma-separated capability names (admins only)
"""

from __future__ import annotations

from fastapi import Depends, Header

from app.core.exceptions import PermissionDeniedError, UnauthorizedError
from app.workflow.caller import CallerContext, Role


def _parse_capabilities(raw: str | None) -> frozenset[str]:
    if not raw:
        return frozenset()
    return frozenset(c.strip() for c in raw.split(",") if c.strip())


async def get_caller(
    caller_id: str | None = Header(default=None, alias="X-Caller-Id"),
    caller_role: str | None = Header(default=None, alias="X-Caller-Role"),
    caller_capabilities: str | None = Header(default=None, alias="X-Caller-Capabilities"),
) -> CallerContext:
    """Build the :class:`CallerContext` for the current request."""
    if not caller_id or not caller_id.strip():
        raise UnauthorizedError()
    try:
        role = Role((caller_role or "").strip().lower())
    except ValueError:
        raise UnauthorizedError(f"Unknown caller role '{caller_role}'") from None

    # Vendors never carry admin capabilities, whatever the header says
    capabilities = (
        _parse_capabilities(caller_capabilities) if role is Role.ADMIN else frozenset()
    )
    return CallerContext(caller_id=caller_id.strip(), role=role, capabilities=capabilities)


async def require_admin(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    if not caller.is_admin:
        raise PermissionDeniedError("Admin access required")
    return caller
