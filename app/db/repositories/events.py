"""
Event store. Every write re-checks that the event date lies in the future.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
import uuid

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AccountNotFoundError, EventNotFoundError, InvalidScheduleError
from app.core.logging import logger
from app.core.timeutils import to_naive_utc, utcnow
from app.db.models import Account, Event, Guest
from app.db.session import in_id_range

EDITABLE_FIELDS = ("title", "description", "location", "event_date")


def _require_future(when: datetime) -> datetime:
    when = to_naive_utc(when)
    if when is None or when <= utcnow():
        raise InvalidScheduleError()
    return when


async def create_event(
    db: AsyncSession,
    owner_id: uuid.UUID,
    title: str,
    description: str,
    location: str,
    event_date: datetime,
) -> Event:
    """
    Create a new event owned by ``owner_id``.

    Raises:
        InvalidScheduleError: If ``event_date`` is not in the future
        AccountNotFoundError: If the owner does not exist
    """
    event_date = _require_future(event_date)

    res = await db.execute(select(Account).where(Account.id == owner_id))
    owner = res.scalars().first()
    if owner is None:
        raise AccountNotFoundError(owner_id)

    ev = Event(
        title=title,
        description=description,
        location=location,
        event_date=event_date,
        owner_id=owner_id,
    )
    ev.owner = owner
    db.add(ev)
    await db.commit()

    logger.info(f"Account {owner_id} created event: {ev.title} (ID: {ev.id})")
    return ev


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    if not in_id_range(event_id):
        return None
    res = await db.execute(select(Event).where(Event.id == event_id))
    return res.scalars().first()


async def list_events_by_owner(db: AsyncSession, owner_id: uuid.UUID) -> List[Event]:
    """Events owned by an account, soonest first."""
    q = (
        select(Event)
        .where(Event.owner_id == owner_id)
        .order_by(Event.event_date.asc(), Event.id.asc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def list_all_events(db: AsyncSession) -> List[Event]:
    """All events, newest created first."""
    q = select(Event).order_by(Event.created_at.desc(), Event.id.desc())
    res = await db.execute(q)
    return list(res.scalars().all())


async def list_upcoming_events(db: AsyncSession, limit: int = 5) -> List[Event]:
    q = (
        select(Event)
        .where(Event.event_date > utcnow())
        .order_by(Event.event_date.asc(), Event.id.asc())
        .limit(limit)
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_events(db: AsyncSession) -> int:
    res = await db.execute(select(func.count(Event.id)))
    return res.scalar() or 0


async def count_events_by_owner(db: AsyncSession) -> Dict[uuid.UUID, int]:
    q = select(Event.owner_id, func.count(Event.id)).group_by(Event.owner_id)
    res = await db.execute(q)
    return {owner_id: count for owner_id, count in res.all()}


async def update_event(db: AsyncSession, event_id: int, fields: Dict[str, Any]) -> Event:
    """
    Apply ``fields`` to an event. The owner never changes.

    The resulting event date must be in the future, whether it was changed or kept.

    Raises:
        EventNotFoundError, InvalidScheduleError
    """
    ev = await get_event(db, event_id)
    if ev is None:
        raise EventNotFoundError(event_id)

    changes = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS and v is not None}
    event_date = _require_future(changes.pop("event_date", ev.event_date))

    for name, value in changes.items():
        setattr(ev, name, value)
    ev.event_date = event_date
    await db.commit()

    logger.info(f"Event updated: {ev.title} (ID: {ev.id})")
    return ev


async def delete_event(db: AsyncSession, event_id: int) -> Event:
    """
    Delete an event and all guest registrations for it in one transaction.

    Returns:
        The deleted event
    """
    ev = await get_event(db, event_id)
    if ev is None:
        raise EventNotFoundError(event_id)

    res = await db.execute(delete(Guest).where(Guest.event_id == event_id))
    await db.delete(ev)
    await db.commit()

    logger.info(f"Event deleted: {ev.title} (ID: {event_id}) with {res.rowcount} guest(s)")
    return ev
