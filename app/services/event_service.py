from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import EventNotFoundError
from app.db.models import Event
from app.db.repositories import (
    create_event as db_create_event,
    delete_event as db_delete_event,
    get_event as db_get_event,
    list_events_by_owner as db_list_events_by_owner,
    list_guests_by_event as db_list_guests_by_event,
    update_event as db_update_event,
)
from app.schemas import EventCreate, EventDetailOut, EventOut, EventUpdate, GuestOut
from app.services.policy import Action, Caller, Target, authorize


class EventService:
    """
    Organiser-facing event management.

    Item-level actions load the event fresh and run the ownership check on it every
    time; a missing event and another account's event produce the same denial.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _load_for(self, caller: Optional[Caller], action: Action, event_id: int) -> Event:
        ev = await db_get_event(self.session, event_id)
        authorize(caller, action, Target(owner_id=ev.owner_id if ev else None))
        if ev is None:
            raise EventNotFoundError(event_id)
        return ev

    async def list_own_events(self, caller: Optional[Caller]) -> List[Event]:
        authorize(caller, Action.LIST_OWN_EVENTS)
        return await db_list_events_by_owner(self.session, caller.id)

    async def create_event(self, caller: Optional[Caller], payload: EventCreate) -> Event:
        authorize(caller, Action.CREATE_EVENT)
        return await db_create_event(
            self.session,
            owner_id=caller.id,
            title=payload.title,
            description=payload.description,
            location=payload.location,
            event_date=payload.event_date,
        )

    async def get_event_details(self, caller: Optional[Caller], event_id: int) -> EventDetailOut:
        ev = await self._load_for(caller, Action.VIEW_EVENT, event_id)
        guests = await db_list_guests_by_event(self.session, ev.id)
        return EventDetailOut(
            **EventOut.model_validate(ev).model_dump(),
            guests=[GuestOut.model_validate(g) for g in guests],
        )

    async def update_event(self, caller: Optional[Caller], event_id: int, payload: EventUpdate) -> Event:
        await self._load_for(caller, Action.EDIT_EVENT, event_id)
        return await db_update_event(self.session, event_id, payload.model_dump(exclude_unset=True))

    async def delete_event(self, caller: Optional[Caller], event_id: int) -> Event:
        await self._load_for(caller, Action.DELETE_EVENT, event_id)
        return await db_delete_event(self.session, event_id)
