"""
Reminder Endpoints
Read access to stored reminders
"""
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.v1.dependencies import AppServices, get_services

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("/", response_model=List[Dict[str, Any]])
async def list_reminders(
    due: Optional[date] = Query(None, alias="date", description="Only reminders due on this date"),
    services: AppServices = Depends(get_services),
):
    """Stored reminders, optionally for a single due date"""
    if due is not None:
        reminders = await services.reminder_service.for_date(due)
    else:
        reminders = await services.reminder_service.all()
    return [r.to_wire() for r in reminders]
