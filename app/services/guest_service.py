"""
Guest intake: the public entry point for guest registrations, plus guest reads.
"""
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import (
    DuplicateRegistrationError,
    EventNotFoundError,
    GuestNotFoundError,
    ValidationError,
)
from app.db.models import Event, Guest
from app.db.repositories import (
    get_event as db_get_event,
    get_guest as db_get_guest,
    list_guests_by_event as db_list_guests_by_event,
    register_guest as db_register_guest,
)
from app.schemas import GuestRegistrationResponse
from app.services.policy import Action, Caller, Target, authorize

REGISTRATION_SUCCESS_MESSAGE = "Registration successful!"

_FAILURE_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    EventNotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateRegistrationError: status.HTTP_409_CONFLICT,
}


@dataclass
class IntakeOutcome:
    status_code: int
    body: GuestRegistrationResponse
    guest: Optional[Guest] = None


class GuestIntakeService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def submit(self, payload: Mapping[str, Any]) -> IntakeOutcome:
        """
        Register a guest from a ``{fullName, email, phoneNumber, eventId}`` body.

        The registry's outcome is relayed as is: success with the new guest id, or
        the typed failure with its own message and status.
        """
        try:
            guest = await db_register_guest(
                self.session,
                event_id=payload.get("eventId"),
                full_name=payload.get("fullName"),
                email=payload.get("email"),
                phone_number=payload.get("phoneNumber"),
            )
        except (ValidationError, EventNotFoundError, DuplicateRegistrationError) as e:
            return IntakeOutcome(
                status_code=_FAILURE_STATUS[type(e)],
                body=GuestRegistrationResponse(success=False, message=e.message),
            )

        return IntakeOutcome(
            status_code=status.HTTP_201_CREATED,
            body=GuestRegistrationResponse(
                success=True,
                message=REGISTRATION_SUCCESS_MESSAGE,
                guest_id=guest.id,
            ),
            guest=guest,
        )

    async def registration_form(self, event_id: int) -> Event:
        """Event shown on the public registration form."""
        ev = await db_get_event(self.session, event_id)
        if ev is None:
            raise EventNotFoundError(event_id)
        return ev

    async def get_guest(self, caller: Optional[Caller], guest_id: int) -> Guest:
        guest = await db_get_guest(self.session, guest_id)
        authorize(caller, Action.VIEW_GUESTS, Target(owner_id=guest.event.owner_id if guest else None))
        if guest is None:
            raise GuestNotFoundError(guest_id)
        return guest

    async def list_event_guests(self, caller: Optional[Caller], event_id: int) -> List[Guest]:
        ev = await db_get_event(self.session, event_id)
        authorize(caller, Action.VIEW_GUESTS, Target(owner_id=ev.owner_id if ev else None))
        if ev is None:
            return []
        return await db_list_guests_by_event(self.session, event_id)
