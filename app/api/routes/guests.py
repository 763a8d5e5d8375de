"""
Public guest data-entry API.

Bodies are camelCase. Registration failures come back as
``{"success": false, "message": ...}`` with 400, 404 or 409.
"""
from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Body, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.params import RowId
from app.auth import get_caller
from app.core.errors import GuestNotFoundError
from app.core.rate_limit import limiter
from app.db.session import get_session
from app.schemas import GuestDetail, GuestSummary
from app.services.guest_service import GuestIntakeService
from app.services.policy import Caller

router = APIRouter(prefix="/api/guests", tags=["guests"])


def get_intake_service(session: AsyncSession = Depends(get_session)) -> GuestIntakeService:
    return GuestIntakeService(session)


@router.post("", status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register_guest_endpoint(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    intake: GuestIntakeService = Depends(get_intake_service)
):
    """
    Register a guest for an event.

    Request body: {"fullName", "email", "phoneNumber", "eventId"}

    Returns:
        201 with {"success": true, "message", "guestId"} and a Location header,
        400 on invalid fields, 404 if the event does not exist,
        409 if the email is already registered for the event
    """
    outcome = await intake.submit(payload)
    headers = {}
    if outcome.guest is not None:
        headers["Location"] = str(request.url_for("get_guest_endpoint", guest_id=outcome.guest.id))
    return JSONResponse(
        status_code=outcome.status_code,
        content=outcome.body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


@router.get("/event/{event_id}", response_model=List[GuestSummary])
async def list_event_guests_endpoint(
    event_id: RowId,
    caller: Optional[Caller] = Depends(get_caller),
    intake: GuestIntakeService = Depends(get_intake_service)
):
    """Guests of an event, oldest registration first."""
    return await intake.list_event_guests(caller, event_id)


@router.get("/{guest_id}", response_model=GuestDetail)
async def get_guest_endpoint(
    guest_id: RowId,
    caller: Optional[Caller] = Depends(get_caller),
    intake: GuestIntakeService = Depends(get_intake_service)
):
    try:
        return await intake.get_guest(caller, guest_id)
    except GuestNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
