"""Status registry router — labels, badge colours and action rules for the UIs."""

from __future__ import annotations

from fastapi import APIRouter

from app.core.response import DataResponse
from app.workflow.statuses import REGISTRIES

router = APIRouter(prefix="/statuses", tags=["Statuses"])


@router.get("", response_model=DataResponse[list[dict]])
async def list_registries():
    return {"data": [registry.describe() for registry in REGISTRIES]}
