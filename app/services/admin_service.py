"""Administrator operations: dashboard, organiser accounts and global event control."""
from typing import List
import uuid
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.errors import AccountNotFoundError
from app.core.logging import logger
from app.db.models import Account, Event, ORGANISER_ROLE
from app.db.repositories import (
    count_accounts_by_role,
    count_events,
    count_events_by_owner,
    count_guests,
    create_account,
    delete_account,
    delete_event as db_delete_event,
    get_account,
    list_accounts_by_role,
    list_all_events as db_list_all_events,
    list_upcoming_events,
)
from app.schemas import AccountCreate, DashboardOut, EventOut, OrganiserOut

UPCOMING_EVENTS_LIMIT = 5


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def dashboard(self) -> DashboardOut:
        upcoming = await list_upcoming_events(self.session, limit=UPCOMING_EVENTS_LIMIT)
        return DashboardOut(
            total_events=await count_events(self.session),
            total_organisers=await count_accounts_by_role(self.session, ORGANISER_ROLE),
            total_guests=await count_guests(self.session),
            upcoming_events=[EventOut.model_validate(ev) for ev in upcoming],
        )

    async def create_organiser(self, payload: AccountCreate) -> Account:
        account = await create_account(
            self.session,
            email=payload.email,
            full_name=payload.full_name,
            password=payload.password,
            roles=[ORGANISER_ROLE],
        )
        logger.info(f"Admin created new Organiser account: {account.email}")
        return account

    async def list_organisers(self) -> List[OrganiserOut]:
        organisers = await list_accounts_by_role(self.session, ORGANISER_ROLE)
        counts = await count_events_by_owner(self.session)
        return [
            OrganiserOut(
                id=o.id,
                full_name=o.full_name,
                email=o.email,
                created_at=o.created_at,
                event_count=counts.get(o.id, 0),
            )
            for o in organisers
        ]

    async def list_all_events(self) -> List[Event]:
        return await db_list_all_events(self.session)

    async def delete_event(self, event_id: int) -> Event:
        ev = await db_delete_event(self.session, event_id)
        logger.info(f"Admin deleted event: {ev.title} (ID: {event_id})")
        return ev

    async def delete_organiser(self, account_id: uuid.UUID) -> int:
        """
        Delete an organiser account with all of its events and their guests.

        Only accounts holding the Organiser role can be removed here.

        Returns:
            Number of events deleted with the account
        """
        account = await get_account(self.session, account_id)
        if account is None or not account.has_role(ORGANISER_ROLE):
            raise AccountNotFoundError(account_id, message="Organiser not found.")
        email = account.email
        deleted_events = await delete_account(self.session, account_id)
        logger.info(f"Admin deleted Organiser: {email} and {deleted_events} event(s)")
        return deleted_events
