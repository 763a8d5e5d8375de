"""
Identity & role store: accounts, credentials, lockout state and role memberships.
"""
from datetime import timedelta
from typing import Iterable, List, Optional
import uuid

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import (
    AccountNotFoundError,
    BadCredentialError,
    DuplicateEmailError,
    FieldError,
    LockedOutError,
    ValidationError,
)
from app.core.logging import logger
from app.core.security import hash_password, validate_password, verify_password
from app.core.timeutils import utcnow
from app.db.models import Account, Event, Guest, Role, account_roles


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_role(db: AsyncSession, name: str) -> Optional[Role]:
    res = await db.execute(select(Role).where(Role.name == name))
    return res.scalars().first()


async def role_exists(db: AsyncSession, name: str) -> bool:
    return await get_role(db, name) is not None


async def create_role(db: AsyncSession, name: str) -> Role:
    role = Role(name=name)
    db.add(role)
    await db.commit()
    return role


async def _resolve_roles(db: AsyncSession, names: Iterable[str]) -> List[Role]:
    roles = []
    for name in names:
        role = await get_role(db, name)
        if role is None:
            raise LookupError(f"Role '{name}' does not exist")
        roles.append(role)
    return roles


async def get_account_by_email(db: AsyncSession, email: str) -> Optional[Account]:
    """
    Retrieve account by email address, case-insensitively.

    Returns:
        Account object if found, None otherwise
    """
    res = await db.execute(select(Account).where(Account.email == normalize_email(email)))
    return res.scalars().first()


async def get_account(db: AsyncSession, account_id: uuid.UUID) -> Optional[Account]:
    res = await db.execute(select(Account).where(Account.id == account_id))
    return res.scalars().first()


async def create_account(
    db: AsyncSession,
    email: str,
    full_name: str,
    password: str,
    roles: Iterable[str] = (),
) -> Account:
    """
    Create a new account with a hashed password and the given roles, in one transaction.

    Raises:
        ValidationError: If the full name is blank
        WeakCredentialError: If the password does not meet the credential policy
        DuplicateEmailError: If the email is already registered
    """
    full_name = (full_name or "").strip()
    if not full_name:
        raise ValidationError([FieldError("full_name", "Full name is required")])
    validate_password(password)

    email = normalize_email(email)
    if await get_account_by_email(db, email):
        raise DuplicateEmailError(email)

    account = Account(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(password),
    )
    account.roles = await _resolve_roles(db, roles)
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise DuplicateEmailError(email)

    logger.info(f"Account created: {email} with roles {sorted(account.role_names)}")
    return account


async def assign_role(db: AsyncSession, account_id: uuid.UUID, role_name: str) -> Account:
    account = await get_account(db, account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    if not account.has_role(role_name):
        account.roles.extend(await _resolve_roles(db, [role_name]))
        await db.commit()
    return account


async def verify_credential(db: AsyncSession, email: str, password: str) -> Account:
    """
    Verify an email/password pair, applying the lockout policy.

    Each failure increments the account's counter; the failure that reaches
    ``MAX_FAILED_ACCESS_ATTEMPTS`` locks the account for ``LOCKOUT_MINUTES`` and
    resets the counter. While locked, every attempt fails with ``LockedOutError``.
    A success resets the counter.

    Raises:
        AccountNotFoundError, LockedOutError, BadCredentialError
    """
    account = await get_account_by_email(db, email)
    if account is None:
        raise AccountNotFoundError(message="Invalid email or password.")

    now = utcnow()
    if account.is_locked_out(now):
        raise LockedOutError()

    if verify_password(password, account.hashed_password):
        account.failed_access_count = 0
        account.lockout_end = None
        await db.commit()
        return account

    account.failed_access_count += 1
    if account.failed_access_count >= settings.MAX_FAILED_ACCESS_ATTEMPTS:
        account.failed_access_count = 0
        account.lockout_end = now + timedelta(minutes=settings.LOCKOUT_MINUTES)
        await db.commit()
        logger.warning(f"Account locked out until {account.lockout_end.isoformat()}: {account.email}")
        raise LockedOutError()

    await db.commit()
    raise BadCredentialError()


async def list_accounts_by_role(db: AsyncSession, role_name: str) -> List[Account]:
    q = (
        select(Account)
        .join(account_roles, account_roles.c.account_id == Account.id)
        .join(Role, Role.id == account_roles.c.role_id)
        .where(Role.name == role_name)
        .order_by(Account.created_at.asc())
    )
    res = await db.execute(q)
    return list(res.scalars().all())


async def count_accounts_by_role(db: AsyncSession, role_name: str) -> int:
    q = (
        select(func.count(account_roles.c.account_id))
        .join(Role, Role.id == account_roles.c.role_id)
        .where(Role.name == role_name)
    )
    res = await db.execute(q)
    return res.scalar() or 0


async def delete_account(db: AsyncSession, account_id: uuid.UUID) -> int:
    """
    Delete an account together with its events and their guests.

    Returns:
        Number of events removed with the account
    """
    account = await get_account(db, account_id)
    if account is None:
        raise AccountNotFoundError(account_id)

    owned_events = select(Event.id).where(Event.owner_id == account_id)
    await db.execute(delete(Guest).where(Guest.event_id.in_(owned_events)))
    res = await db.execute(delete(Event).where(Event.owner_id == account_id))
    await db.delete(account)
    await db.commit()

    logger.info(f"Account deleted: {account.email} with {res.rowcount} event(s)")
    return res.rowcount
