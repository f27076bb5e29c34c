"""General update endpoints: trigger an upstream refresh of every section."""

import asyncio

from fastapi import APIRouter, Depends, Query

from api.models import UpdateStatusOut
from api.services import get_update, require_authenticated
from dashboard.update import GeneralUpdate

router = APIRouter(prefix="/update", tags=["update"], dependencies=[Depends(require_authenticated)])


@router.post("", response_model=UpdateStatusOut, summary="Trigger a general update")
async def trigger_update(
    wait: bool = Query(False, description="Wait for the webhook call to finish"),
    update: GeneralUpdate = Depends(get_update),
) -> UpdateStatusOut:
    """Start an upstream refresh; a trigger while one is running is ignored."""
    task = update.trigger()
    if task is not None and wait:
        await asyncio.shield(task)
    return UpdateStatusOut(**update.status().to_dict())


@router.get("", response_model=UpdateStatusOut, summary="General update status")
async def update_status(update: GeneralUpdate = Depends(get_update)) -> UpdateStatusOut:
    return UpdateStatusOut(**update.status().to_dict())
