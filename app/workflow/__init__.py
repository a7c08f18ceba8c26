"""Workflow package — status registries and the pure transition engine.

Files:
  caller.py    — CallerContext / Role passed explicitly into every call
  registry.py  — StatusRegistry + ActionRule (pure data)
  statuses.py  — onboarding, account-status and payout registries
  engine.py    — apply_transition(): validate + compute the next record

Rule: no SQLAlchemy and no I/O in this package; persistence lives in app/services/
"""

from app.workflow.caller import CallerContext, Role
from app.workflow.engine import apply_transition
from app.workflow.registry import ActionRule, StatusBadge, StatusRegistry
from app.workflow.statuses import ACCOUNT, ONBOARDING, PAYOUT

__all__ = [
    "ACCOUNT",
    "ActionRule",
    "CallerContext",
    "ONBOARDING",
    "PAYOUT",
    "Role",
    "StatusBadge",
    "StatusRegistry",
    "apply_transition",
]
