"""
Guest registry. One registration per (event, email).
"""
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DuplicateRegistrationError, EventNotFoundError, ValidationError
from app.core.logging import logger
from app.db.models import Guest
from app.db.session import in_id_range
from app.db.repositories.accounts import normalize_email
from app.db.repositories.events import get_event
from app.services.validation import validate_guest_registration


def event_missing(event_id) -> EventNotFoundError:
    return EventNotFoundError(event_id, f"Event with ID {event_id} does not exist.")


def _is_duplicate_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower()
    return (
        "uq_guest_event_email" in message
        or "duplicate key" in message
        or "unique constraint" in message
    )


async def get_guest_for_event(db: AsyncSession, event_id: int, email: str) -> Optional[Guest]:
    q = select(Guest).where(Guest.event_id == event_id, Guest.email == normalize_email(email))
    res = await db.execute(q)
    return res.scalars().first()


async def register_guest(
    db: AsyncSession,
    event_id,
    full_name,
    email,
    phone_number,
) -> Guest:
    """
    Register a guest for an event.

    Validates the fields, checks the event exists, rejects a second registration
    of the same email for the same event, then inserts. The unique constraint on
    (event_id, email) settles concurrent registrations: the loser's commit fails
    and is reported as a duplicate.

    Raises:
        ValidationError, EventNotFoundError, DuplicateRegistrationError
    """
    errors = validate_guest_registration(full_name, email, phone_number, event_id)
    if errors:
        raise ValidationError(errors)

    event = await get_event(db, event_id)
    if event is None:
        raise event_missing(event_id)

    email = normalize_email(email)
    if await get_guest_for_event(db, event_id, email):
        raise DuplicateRegistrationError(event_id, email)

    guest = Guest(
        full_name=full_name.strip(),
        email=email,
        phone_number=phone_number.strip(),
        event_id=event_id,
    )
    guest.event = event
    db.add(guest)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        if _is_duplicate_violation(e):
            raise DuplicateRegistrationError(event_id, email)
        # The event was removed while the registration was in flight
        raise event_missing(event_id)

    logger.info(f"Guest registered: {guest.full_name} for event ID {event_id}")
    return guest


async def get_guest(db: AsyncSession, guest_id: int) -> Optional[Guest]:
    if not in_id_range(guest_id):
        return None
    res = await db.execute(select(Guest).where(Guest.id == guest_id))
    return res.scalars().first()


async def list_guests_by_event(db: AsyncSession, event_id: int) -> List[Guest]:
    """Guests of an event, oldest registration first."""
    q = (
        select(Guest)
        .where(Guest.event_id == event_id)
        .order_by(Guest.registered_at.asc(), Guest.id.asc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_guests(db: AsyncSession) -> int:
    res = await db.execute(select(func.count(Guest.id)))
    return res.scalar() or 0
