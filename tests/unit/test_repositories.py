"""
Unit tests for repository functions.
Tests the identity store, the event store and the guest registry against the test database.
"""
import asyncio
import uuid
import pytest
from datetime import timedelta
from sqlalchemy import select, func

from app.core.config import settings
from app.core.errors import (
    AccountNotFoundError,
    BadCredentialError,
    DuplicateEmailError,
    DuplicateRegistrationError,
    EventNotFoundError,
    InvalidScheduleError,
    LockedOutError,
    ValidationError,
    WeakCredentialError,
)
from app.core.timeutils import utcnow
from app.db.models import ADMIN_ROLE, ORGANISER_ROLE, Event, Guest, account_roles
from app.db.repositories import (
    assign_role,
    count_accounts_by_role,
    count_events,
    count_events_by_owner,
    count_guests,
    create_account,
    create_event,
    delete_account,
    delete_event,
    get_account,
    get_account_by_email,
    get_event,
    get_guest,
    list_accounts_by_role,
    list_all_events,
    list_events_by_owner,
    list_guests_by_event,
    list_upcoming_events,
    register_guest,
    update_event,
    verify_credential,
)
from conftest import TEST_PASSWORD, TestSessionLocal, make_event, make_guest


@pytest.mark.unit
@pytest.mark.asyncio
class TestAccountRepository:

    async def test_create_account(self, db_session):
        account = await create_account(
            db_session, "New.Organiser@Example.com", " New Organiser ", "Test@123", roles=[ORGANISER_ROLE]
        )

        assert account.id is not None
        assert account.email == "new.organiser@example.com"
        assert account.full_name == "New Organiser"
        assert account.role_names == frozenset({ORGANISER_ROLE})
        assert account.hashed_password != "Test@123"
        assert account.failed_access_count == 0
        assert account.lockout_end is None

    async def test_create_account_duplicate_email(self, db_session, organiser):
        with pytest.raises(DuplicateEmailError):
            await create_account(db_session, "ORGANISER@example.com", "Again", "Test@123")

    async def test_create_account_weak_password(self, db_session):
        with pytest.raises(WeakCredentialError):
            await create_account(db_session, "weak@example.com", "Weak", "password")
        assert await get_account_by_email(db_session, "weak@example.com") is None

    async def test_create_account_blank_name(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await create_account(db_session, "blank@example.com", "   ", "Test@123")
        assert exc_info.value.message == "Full name is required"
        assert await get_account_by_email(db_session, "blank@example.com") is None

    async def test_create_account_unknown_role(self, db_session):
        with pytest.raises(LookupError):
            await create_account(db_session, "x@example.com", "X", "Test@123", roles=["Superuser"])

    async def test_get_account_by_email_is_case_insensitive(self, db_session, organiser):
        found = await get_account_by_email(db_session, "  Organiser@EXAMPLE.com ")
        assert found is not None
        assert found.id == organiser.id

    async def test_assign_role(self, db_session, organiser):
        account = await assign_role(db_session, organiser.id, ADMIN_ROLE)
        assert account.role_names == frozenset({ADMIN_ROLE, ORGANISER_ROLE})

        # Assigning again is a no-op
        account = await assign_role(db_session, organiser.id, ADMIN_ROLE)
        assert len(account.roles) == 2

    async def test_list_and_count_by_role(self, db_session, organiser, other_organiser, admin):
        organisers = await list_accounts_by_role(db_session, ORGANISER_ROLE)

        assert [a.id for a in organisers] == [organiser.id, other_organiser.id]
        assert await count_accounts_by_role(db_session, ORGANISER_ROLE) == 2
        assert await count_accounts_by_role(db_session, ADMIN_ROLE) == 1


@pytest.mark.unit
@pytest.mark.asyncio
class TestCredentialVerification:

    async def test_verify_credential_success(self, db_session, organiser):
        account = await verify_credential(db_session, "organiser@example.com", TEST_PASSWORD)
        assert account.id == organiser.id

    async def test_unknown_email(self, db_session):
        with pytest.raises(AccountNotFoundError):
            await verify_credential(db_session, "nobody@example.com", TEST_PASSWORD)

    async def test_wrong_password_counts_failure(self, db_session, organiser):
        with pytest.raises(BadCredentialError):
            await verify_credential(db_session, organiser.email, "Wrong@123")
        assert organiser.failed_access_count == 1

    async def test_lockout_on_fifth_failure(self, db_session, organiser):
        for _ in range(settings.MAX_FAILED_ACCESS_ATTEMPTS - 1):
            with pytest.raises(BadCredentialError):
                await verify_credential(db_session, organiser.email, "Wrong@123")

        with pytest.raises(LockedOutError):
            await verify_credential(db_session, organiser.email, "Wrong@123")

        assert organiser.failed_access_count == 0
        assert organiser.lockout_end > utcnow() + timedelta(minutes=settings.LOCKOUT_MINUTES - 1)

        # Correct password is refused while locked
        with pytest.raises(LockedOutError):
            await verify_credential(db_session, organiser.email, TEST_PASSWORD)

    async def test_expired_lockout_allows_login(self, db_session, organiser):
        organiser.lockout_end = utcnow() - timedelta(seconds=1)
        organiser.failed_access_count = 3
        await db_session.commit()

        account = await verify_credential(db_session, organiser.email, TEST_PASSWORD)

        assert account.failed_access_count == 0
        assert account.lockout_end is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestEventRepository:

    async def test_create_event(self, db_session, organiser):
        when = utcnow() + timedelta(days=3)
        ev = await create_event(db_session, organiser.id, "Pycon", "Talks", "KICC", when)

        assert ev.id is not None
        assert ev.owner_id == organiser.id
        assert ev.owner_name == "Olive Organiser"
        assert ev.event_date == when

    async def test_create_event_in_past(self, db_session, organiser):
        with pytest.raises(InvalidScheduleError):
            await create_event(db_session, organiser.id, "Old", "d", "l", utcnow() - timedelta(minutes=1))
        assert await count_events(db_session) == 0

    async def test_create_event_unknown_owner(self, db_session):
        with pytest.raises(AccountNotFoundError):
            await create_event(db_session, uuid.uuid4(), "T", "d", "l", utcnow() + timedelta(days=1))

    async def test_list_events_by_owner_soonest_first(self, db_session, organiser, other_organiser):
        later = await make_event(db_session, organiser, "Later", days_from_now=10)
        sooner = await make_event(db_session, organiser, "Sooner", days_from_now=2)
        await make_event(db_session, other_organiser, "Someone else's", days_from_now=1)

        events = await list_events_by_owner(db_session, organiser.id)
        assert [e.id for e in events] == [sooner.id, later.id]

    async def test_list_all_events_newest_created_first(self, db_session, organiser, other_organiser):
        first = await make_event(db_session, organiser, "First", days_from_now=10)
        second = await make_event(db_session, other_organiser, "Second", days_from_now=2)

        events = await list_all_events(db_session)
        assert [e.id for e in events] == [second.id, first.id]

    async def test_upcoming_excludes_past_and_is_limited(self, db_session, organiser):
        await make_event(db_session, organiser, "Past", days_from_now=-1)
        for day in range(1, 8):
            await make_event(db_session, organiser, f"Day {day}", days_from_now=day)

        upcoming = await list_upcoming_events(db_session, limit=5)
        assert [e.title for e in upcoming] == ["Day 1", "Day 2", "Day 3", "Day 4", "Day 5"]

    async def test_count_events_by_owner(self, db_session, organiser, other_organiser):
        await make_event(db_session, organiser, "A", days_from_now=1)
        await make_event(db_session, organiser, "B", days_from_now=2)

        counts = await count_events_by_owner(db_session)
        assert counts == {organiser.id: 2}

    async def test_update_event(self, db_session, future_event):
        when = utcnow() + timedelta(days=20)
        ev = await update_event(
            db_session, future_event.id, {"title": "Renamed", "location": None, "event_date": when}
        )

        assert ev.title == "Renamed"
        assert ev.location == "Nairobi Garage"
        assert ev.event_date == when

    async def test_update_event_to_past(self, db_session, future_event):
        with pytest.raises(InvalidScheduleError):
            await update_event(db_session, future_event.id, {"event_date": utcnow() - timedelta(days=1)})

    async def test_update_past_event_fails(self, db_session, past_event):
        with pytest.raises(InvalidScheduleError):
            await update_event(db_session, past_event.id, {"title": "Still in the past"})

    async def test_update_event_ignores_owner(self, db_session, future_event, other_organiser):
        ev = await update_event(db_session, future_event.id, {"owner_id": other_organiser.id})
        assert ev.owner_id == future_event.owner_id

    async def test_update_missing_event(self, db_session):
        with pytest.raises(EventNotFoundError):
            await update_event(db_session, 999, {"title": "Ghost"})

    async def test_delete_event_removes_guests(self, db_session, future_event, past_event):
        await make_guest(db_session, future_event, "a@example.com")
        await make_guest(db_session, future_event, "b@example.com")
        kept = await make_guest(db_session, past_event, "c@example.com")

        await delete_event(db_session, future_event.id)

        assert await get_event(db_session, future_event.id) is None
        remaining = await db_session.execute(select(Guest.id))
        assert remaining.scalars().all() == [kept.id]

    async def test_delete_missing_event(self, db_session):
        with pytest.raises(EventNotFoundError):
            await delete_event(db_session, 999)


@pytest.mark.unit
@pytest.mark.asyncio
class TestGuestRepository:

    async def test_register_guest(self, db_session, future_event):
        guest = await register_guest(db_session, future_event.id, " Jane Guest ", "Jane@Example.com", "0700000000")

        assert guest.id is not None
        assert guest.full_name == "Jane Guest"
        assert guest.email == "jane@example.com"
        assert guest.event_title == "Python Meetup"
        assert guest.registered_at is not None

    async def test_register_guest_missing_event(self, db_session):
        with pytest.raises(EventNotFoundError) as exc_info:
            await register_guest(db_session, 999, "Jane", "jane@example.com", "0700000000")
        assert exc_info.value.message == "Event with ID 999 does not exist."

    async def test_register_guest_invalid_fields(self, db_session, future_event):
        with pytest.raises(ValidationError) as exc_info:
            await register_guest(db_session, future_event.id, "", "jane@example.com", "")
        assert exc_info.value.message == "Full name is required, Phone number is required"
        assert await count_guests(db_session) == 0

    async def test_register_guest_duplicate(self, db_session, future_event):
        await register_guest(db_session, future_event.id, "Jane", "jane@example.com", "0700000000")

        with pytest.raises(DuplicateRegistrationError):
            await register_guest(db_session, future_event.id, "Jane Again", "JANE@example.com", "0711111111")
        assert await count_guests(db_session) == 1

    async def test_same_email_for_different_events(self, db_session, future_event, past_event):
        await register_guest(db_session, future_event.id, "Jane", "jane@example.com", "0700000000")
        await register_guest(db_session, past_event.id, "Jane", "jane@example.com", "0700000000")

        assert await count_guests(db_session) == 2

    async def test_register_guest_event_id_beyond_column_range(self, db_session, future_event):
        huge_id = 2**70
        with pytest.raises(EventNotFoundError) as exc_info:
            await register_guest(db_session, huge_id, "Jane", "jane@example.com", "0700000000")
        assert exc_info.value.message == f"Event with ID {huge_id} does not exist."

    async def test_lookups_beyond_column_range_find_nothing(self, db_session, future_event):
        assert await get_event(db_session, 2**31) is None
        assert await get_event(db_session, 0) is None
        assert await get_guest(db_session, 2**63) is None
        assert await get_guest(db_session, -1) is None

    async def test_concurrent_registrations_store_one(self, db_session, future_event):
        """Two sessions racing on the same (event, email) yield one registration and one duplicate."""
        event_id = future_event.id

        async def attempt():
            async with TestSessionLocal() as session:
                try:
                    await register_guest(session, event_id, "Jane", "jane@example.com", "0700000000")
                except DuplicateRegistrationError:
                    return "duplicate"
                return "registered"

        outcomes = await asyncio.gather(attempt(), attempt())

        assert sorted(outcomes) == ["duplicate", "registered"]
        assert await count_guests(db_session) == 1

    async def test_duplicate_caught_by_unique_constraint(self, db_session, future_event, monkeypatch):
        """When the pre-check misses a concurrent registration, the constraint still decides."""
        event_id = future_event.id
        await register_guest(db_session, event_id, "Jane", "jane@example.com", "0700000000")

        async def no_existing_guest(*args, **kwargs):
            return None

        monkeypatch.setattr("app.db.repositories.guests.get_guest_for_event", no_existing_guest)

        with pytest.raises(DuplicateRegistrationError):
            await register_guest(db_session, event_id, "Jane", "jane@example.com", "0700000000")

        total = await db_session.execute(select(func.count(Guest.id)))
        assert total.scalar() == 1

    async def test_list_guests_oldest_first(self, db_session, future_event):
        first = await make_guest(db_session, future_event, "a@example.com")
        second = await make_guest(db_session, future_event, "b@example.com")

        guests = await list_guests_by_event(db_session, future_event.id)
        assert [g.id for g in guests] == [first.id, second.id]
        assert await list_guests_by_event(db_session, 999) == []

    async def test_get_guest(self, db_session, future_event):
        guest = await make_guest(db_session, future_event, "a@example.com")

        assert (await get_guest(db_session, guest.id)).email == "a@example.com"
        assert await get_guest(db_session, 999) is None


@pytest.mark.unit
@pytest.mark.asyncio
class TestAccountDeletion:

    async def test_delete_account_cascades(self, db_session, organiser, other_organiser):
        own = await make_event(db_session, organiser, "Own", days_from_now=3)
        other = await make_event(db_session, other_organiser, "Other", days_from_now=3)
        await make_guest(db_session, own, "a@example.com")
        await make_guest(db_session, own, "b@example.com")
        await make_guest(db_session, other, "c@example.com")
        organiser_id = organiser.id

        deleted = await delete_account(db_session, organiser_id)

        assert deleted == 1
        assert await get_account(db_session, organiser_id) is None
        assert [e.id for e in (await db_session.execute(select(Event))).scalars().all()] == [other.id]
        assert await count_guests(db_session) == 1
        memberships = await db_session.execute(
            select(func.count()).select_from(account_roles).where(account_roles.c.account_id == organiser_id)
        )
        assert memberships.scalar() == 0

    async def test_delete_missing_account(self, db_session):
        with pytest.raises(AccountNotFoundError):
            await delete_account(db_session, uuid.uuid4())
