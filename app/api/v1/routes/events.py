from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.params import RowId
from app.schemas import EventCreate, EventDetailOut, EventOut, EventUpdate
from app.db.session import get_session
from app.services.event_service import EventService
from app.services.policy import Caller
from app.auth import get_caller

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


@router.get("/", response_model=List[EventOut])
async def list_my_events(
    caller: Optional[Caller] = Depends(get_caller),
    event_service: EventService = Depends(get_event_service)
):
    """Events owned by the calling organiser, soonest first."""
    return await event_service.list_own_events(caller)


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: EventCreate,
    caller: Optional[Caller] = Depends(get_caller),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.create_event(caller, payload)


@router.get("/{event_id}", response_model=EventDetailOut)
async def get_event_detail(
    event_id: RowId,
    caller: Optional[Caller] = Depends(get_caller),
    event_service: EventService = Depends(get_event_service)
):
    """Event details including its guest list; owner only."""
    return await event_service.get_event_details(caller, event_id)


@router.put("/{event_id}", response_model=EventOut)
async def update_event_endpoint(
    event_id: RowId,
    payload: EventUpdate,
    caller: Optional[Caller] = Depends(get_caller),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.update_event(caller, event_id, payload)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event_endpoint(
    event_id: RowId,
    caller: Optional[Caller] = Depends(get_caller),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(caller, event_id)
    return None
