"""
Repository layer for database operations.

Async functions over an ``AsyncSession`` for the identity & role store, the event
store and the guest registry. Each mutating function commits exactly once.
"""
from app.db.repositories.accounts import (
    assign_role,
    count_accounts_by_role,
    create_account,
    create_role,
    delete_account,
    get_account,
    get_account_by_email,
    list_accounts_by_role,
    normalize_email,
    role_exists,
    verify_credential,
)
from app.db.repositories.events import (
    count_events,
    count_events_by_owner,
    create_event,
    delete_event,
    get_event,
    list_all_events,
    list_events_by_owner,
    list_upcoming_events,
    update_event,
)
from app.db.repositories.guests import (
    count_guests,
    get_guest,
    get_guest_for_event,
    list_guests_by_event,
    register_guest,
)

__all__ = [
    "assign_role",
    "count_accounts_by_role",
    "create_account",
    "create_role",
    "delete_account",
    "get_account",
    "get_account_by_email",
    "list_accounts_by_role",
    "normalize_email",
    "role_exists",
    "verify_credential",
    "count_events",
    "count_events_by_owner",
    "create_event",
    "delete_event",
    "get_event",
    "list_all_events",
    "list_events_by_owner",
    "list_upcoming_events",
    "update_event",
    "count_guests",
    "get_guest",
    "get_guest_for_event",
    "list_guests_by_event",
    "register_guest",
]
