"""Status registry — statuses, their display badges, and the action rules between them.

A registry is pure data. The transition engine (``app.workflow.engine``) is
parameterized by one registry instance; see ``app.workflow.statuses`` for the
onboarding, account-status and payout registries.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.workflow.caller import Role


class StatusBadge(BaseModel):
    label: str
    color: str

    model_config = {"frozen": True}


class ActionRule(BaseModel):
    """One action kind: where it may start, where it lands, and what it needs.

    Field mappings name attributes on the record (left) and the action (right).
    """

    kind: str
    label: str
    sources: frozenset[Any]
    target: Any
    roles: frozenset[Role]
    required: tuple[str, ...] = ()
    capability: str | None = None
    writes: dict[str, str] = Field(default_factory=dict)
    # written only when the action carries a value
    carries: dict[str, str] = Field(default_factory=dict)
    clears: tuple[str, ...] = ()
    stamp_at: str | None = None
    stamp_by: str | None = None

    model_config = {"frozen": True}


class StatusRegistry:
    """Maps each status to its badge and each action kind to its :class:`ActionRule`.

    Construction fails if a status has no badge or a rule references a
    status outside ``statuses``, so the table is checked once at import.
    """

    def __init__(
        self,
        name: str,
        statuses: type[enum.Enum],
        status_field: str,
        badges: dict[Any, StatusBadge],
        rules: Iterable[ActionRule],
    ):
        self.name = name
        self.statuses = statuses
        self.status_field = status_field
        self._badges = dict(badges)
        self._rules: dict[str, ActionRule] = {}

        missing = [s.value for s in statuses if s not in self._badges]
        if missing:
            raise ValueError(f"{name}: no badge for statuses {missing}")

        for rule in rules:
            if rule.kind in self._rules:
                raise ValueError(f"{name}: duplicate action '{rule.kind}'")
            unknown = [
                s for s in (*rule.sources, rule.target) if not isinstance(s, statuses)
            ]
            if unknown:
                raise ValueError(f"{name}: action '{rule.kind}' references {unknown}")
            self._rules[rule.kind] = rule

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def coerce(self, status: Any) -> enum.Enum | None:
        """Return the enum member for ``status`` (member or raw value), or None."""
        if isinstance(status, self.statuses):
            return status
        try:
            return self.statuses(status)
        except ValueError:
            return None

    def rule(self, kind: Any) -> ActionRule | None:
        return self._rules.get(_kind_value(kind))

    @property
    def rules(self) -> list[ActionRule]:
        return list(self._rules.values())

    def badge(self, status: Any) -> StatusBadge | None:
        member = self.coerce(status)
        return self._badges.get(member) if member is not None else None

    def allowed_transitions(self, status: Any, role: Role | None = None) -> set[str]:
        """Action kinds that may be applied from ``status``.

        Unknown statuses yield an empty set. When ``role`` is given, only
        actions that role may issue are returned.
        """
        member = self.coerce(status)
        if member is None:
            return set()
        return {
            rule.kind
            for rule in self._rules.values()
            if member in rule.sources and (role is None or role in rule.roles)
        }

    def describe(self) -> dict:
        """Plain-data view of the registry (served by ``GET /api/v1/statuses``)."""
        return {
            "name": self.name,
            "statuses": [
                {"value": s.value, "label": self._badges[s].label, "color": self._badges[s].color}
                for s in self.statuses
            ],
            "actions": [
                {
                    "kind": r.kind,
                    "label": r.label,
                    "from": sorted(s.value for s in r.sources),
                    "to": r.target.value,
                    "roles": sorted(role.value for role in r.roles),
                    "required": [to_camel(f) for f in r.required],
                    "capability": r.capability,
                }
                for r in self._rules.values()
            ],
        }


def _kind_value(kind: Any) -> str:
    return kind.value if isinstance(kind, enum.Enum) else str(kind)
