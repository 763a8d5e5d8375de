"""Database models package."""
from app.db.models.role import Role, account_roles, ADMIN_ROLE, ORGANISER_ROLE
from app.db.models.account import Account
from app.db.models.event import Event
from app.db.models.guest import Guest

__all__ = ["Role", "account_roles", "ADMIN_ROLE", "ORGANISER_ROLE", "Account", "Event", "Guest"]
