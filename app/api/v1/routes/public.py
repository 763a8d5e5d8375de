"""
Public guest registration form.

The form posts the same body as ``POST /api/guests`` and gets the same outcome and
status code back, through the same intake service.
"""
from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.params import RowId
from app.schemas import PublicEventOut
from app.db.session import get_session
from app.services.guest_service import GuestIntakeService
from app.core.rate_limit import limiter

router = APIRouter(prefix="/public", tags=["public"])


def get_intake_service(session: AsyncSession = Depends(get_session)) -> GuestIntakeService:
    return GuestIntakeService(session)


@router.get("/events/{event_id}/register", response_model=PublicEventOut)
async def registration_form(
    event_id: RowId,
    intake: GuestIntakeService = Depends(get_intake_service)
):
    return await intake.registration_form(event_id)


@router.post("/events/{event_id}/register")
@limiter.limit("10/minute")
async def submit_registration_form(
    request: Request,
    event_id: RowId,
    payload: Dict[str, Any] = Body(...),
    intake: GuestIntakeService = Depends(get_intake_service)
):
    body = dict(payload)
    body.setdefault("eventId", event_id)
    outcome = await intake.submit(body)
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.body.model_dump(by_alias=True, exclude_none=True),
    )
