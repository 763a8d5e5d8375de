"""
Authorization policy.

``decide`` is a pure function over the caller's identity and roles, the requested
action, and the owner of the target resource. It keeps no state, so item-level
checks are re-evaluated against a freshly loaded target on every request.
"""
import enum
import uuid
from dataclasses import dataclass
from typing import FrozenSet, Optional

from app.core.errors import (
    AuthenticationRequiredError,
    DomainError,
    InsufficientRoleError,
    NotOwnerError,
)
from app.core.logging import logger
from app.db.models.role import ADMIN_ROLE, ORGANISER_ROLE


class Action(str, enum.Enum):
    # public
    VIEW_REGISTRATION_FORM = "view_registration_form"
    SUBMIT_GUEST_REGISTRATION = "submit_guest_registration"
    VIEW_AUTH_PAGES = "view_auth_pages"
    VIEW_ACCESS_DENIED = "view_access_denied"
    # admin
    VIEW_DASHBOARD = "view_dashboard"
    CREATE_ORGANISER = "create_organiser"
    LIST_ORGANISERS = "list_organisers"
    LIST_ALL_EVENTS = "list_all_events"
    DELETE_ANY_EVENT = "delete_any_event"
    DELETE_ORGANISER = "delete_organiser"
    # organiser
    LIST_OWN_EVENTS = "list_own_events"
    CREATE_EVENT = "create_event"
    VIEW_EVENT = "view_event"
    EDIT_EVENT = "edit_event"
    DELETE_EVENT = "delete_event"
    # guest reads; admin-wide, organiser ownership-scoped
    VIEW_GUESTS = "view_guests"


class DenyReason(str, enum.Enum):
    AUTHENTICATION_REQUIRED = "AuthenticationRequired"
    NOT_OWNER = "NotOwner"
    INSUFFICIENT_ROLE = "InsufficientRole"


PUBLIC_ACTIONS = frozenset({
    Action.VIEW_REGISTRATION_FORM,
    Action.SUBMIT_GUEST_REGISTRATION,
    Action.VIEW_AUTH_PAGES,
    Action.VIEW_ACCESS_DENIED,
})

ADMIN_ACTIONS = frozenset({
    Action.VIEW_DASHBOARD,
    Action.CREATE_ORGANISER,
    Action.LIST_ORGANISERS,
    Action.LIST_ALL_EVENTS,
    Action.DELETE_ANY_EVENT,
    Action.DELETE_ORGANISER,
    Action.VIEW_GUESTS,
})

ORGANISER_ACTIONS = frozenset({
    Action.LIST_OWN_EVENTS,
    Action.CREATE_EVENT,
})

OWNERSHIP_SCOPED_ACTIONS = frozenset({
    Action.VIEW_EVENT,
    Action.EDIT_EVENT,
    Action.DELETE_EVENT,
    Action.VIEW_GUESTS,
})


@dataclass(frozen=True)
class Caller:
    id: uuid.UUID
    roles: FrozenSet[str]

    @classmethod
    def from_account(cls, account) -> "Caller":
        return cls(id=account.id, roles=account.role_names)


@dataclass(frozen=True)
class Target:
    """The resource an action applies to; ``owner_id`` is None when it does not exist."""
    owner_id: Optional[uuid.UUID] = None


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[DenyReason] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def decide(caller: Optional[Caller], action: Action, target: Optional[Target] = None) -> Decision:
    if action in PUBLIC_ACTIONS:
        return ALLOW

    if caller is None:
        return Decision(False, DenyReason.AUTHENTICATION_REQUIRED)

    if ADMIN_ROLE in caller.roles and action in ADMIN_ACTIONS:
        return ALLOW

    if ORGANISER_ROLE in caller.roles:
        if action in ORGANISER_ACTIONS:
            return ALLOW
        if action in OWNERSHIP_SCOPED_ACTIONS:
            owner_id = target.owner_id if target else None
            if owner_id is not None and owner_id == caller.id:
                return ALLOW
            return Decision(False, DenyReason.NOT_OWNER)

    return Decision(False, DenyReason.INSUFFICIENT_ROLE)


_DENIAL_ERRORS = {
    DenyReason.AUTHENTICATION_REQUIRED: AuthenticationRequiredError,
    DenyReason.NOT_OWNER: NotOwnerError,
    DenyReason.INSUFFICIENT_ROLE: InsufficientRoleError,
}


def denial_error(reason: DenyReason) -> DomainError:
    return _DENIAL_ERRORS[reason]()


def authorize(caller: Optional[Caller], action: Action, target: Optional[Target] = None) -> None:
    """Raise the matching domain error unless ``decide`` allows the action."""
    decision = decide(caller, action, target)
    if decision:
        return
    logger.warning(
        f"Denied {action.value} for caller {caller.id if caller else 'anonymous'}: {decision.reason.value}"
    )
    raise denial_error(decision.reason)
