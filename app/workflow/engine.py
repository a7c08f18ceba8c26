"""State transition engine.

``apply_transition`` validates one action against one record and returns the
updated record. It performs no I/O; persisting the result is the caller's job
(see ``app.services.review``).
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel

from app.core.exceptions import (
    InvalidTransitionError,
    MissingRequiredFieldError,
    PermissionDeniedError,
)
from app.workflow.caller import CallerContext
from app.workflow.registry import ActionRule, StatusRegistry

RecordT = TypeVar("RecordT", bound=BaseModel)


def apply_transition(
    registry: StatusRegistry,
    record: RecordT,
    action: BaseModel,
    caller: CallerContext,
    *,
    now: datetime | None = None,
) -> RecordT:
    """Return a copy of ``record`` moved to the target status of ``action``.

    Checks run in order and the first failure is raised:
      1. unknown action kind                    → InvalidTransitionError
      2. caller role / capability insufficient  → PermissionDeniedError
      3. action not allowed from current status → InvalidTransitionError
      4. a required action field is blank       → MissingRequiredFieldError
    """
    kind = _value(getattr(action, "kind", None))
    current = getattr(record, registry.status_field)

    rule = registry.rule(kind)
    if rule is None:
        raise InvalidTransitionError(kind, _value(current))

    check_permission(rule, caller)

    if kind not in registry.allowed_transitions(current):
        raise InvalidTransitionError(kind, _value(current))

    for name in rule.required:
        if not _is_present(getattr(action, name, None)):
            raise MissingRequiredFieldError(_api_name(action, name))

    return record.model_copy(update=_updates(registry, rule, action, caller, now))


def check_permission(rule: ActionRule, caller: CallerContext) -> None:
    if caller.role not in rule.roles:
        raise PermissionDeniedError(
            f"Role '{caller.role.value}' cannot perform '{rule.kind}'"
        )
    if rule.capability and not caller.has_capability(rule.capability):
        raise PermissionDeniedError(
            f"Capability '{rule.capability}' is required for '{rule.kind}'",
            capability=rule.capability,
        )


def is_permitted(rule: ActionRule, caller: CallerContext) -> bool:
    try:
        check_permission(rule, caller)
    except PermissionDeniedError:
        return False
    return True


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _updates(
    registry: StatusRegistry,
    rule: ActionRule,
    action: BaseModel,
    caller: CallerContext,
    now: datetime | None,
) -> dict[str, Any]:
    updates: dict[str, Any] = {registry.status_field: rule.target}

    for field in rule.clears:
        updates[field] = None
    for record_field, action_field in rule.writes.items():
        updates[record_field] = _clean(getattr(action, action_field, None))
    for record_field, action_field in rule.carries.items():
        value = _clean(getattr(action, action_field, None))
        if value is not None:
            updates[record_field] = value

    if rule.stamp_at:
        updates[rule.stamp_at] = now or datetime.now(timezone.utc)
    if rule.stamp_by:
        updates[rule.stamp_by] = caller.caller_id
    return updates


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) > 0
    return True


def _clean(value: Any) -> Any:
    """Trim strings; blank strings and empty lists become None."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (list, tuple)):
        items = [v.strip() if isinstance(v, str) else v for v in value]
        items = [v for v in items if v not in ("", None)]
        return items or None
    return value


def _api_name(action: BaseModel, field: str) -> str:
    """Client-facing (alias) name of an action field, e.g. ``transactionReference``."""
    info = type(action).model_fields.get(field)
    if info is not None and info.alias:
        return info.alias
    return field


def _value(v: Any) -> Any:
    return v.value if isinstance(v, enum.Enum) else v
