import uuid
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.db.session import get_session
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.models import Account
from app.db.repositories import get_account
from app.core.errors import AuthenticationRequiredError
from app.core.security import decode_token, is_token_revoked
from app.services.policy import Action, Caller, authorize

# Anonymous callers are allowed through; the policy decides what they may do
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_optional_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> Optional[Account]:
    """
    Resolve the calling account from a bearer token, or None when no token was sent.

    A token that is present but invalid, revoked, of the wrong type, or that names a
    deleted account is rejected with 401 rather than treated as anonymous.
    """
    if credentials is None:
        return None

    token = credentials.credentials
    if await is_token_revoked(token):
        raise _unauthorized("Token has been revoked")

    try:
        payload = decode_token(token)
    except ValueError:
        raise _unauthorized("Could not validate credentials")

    if payload.get("type") != "access":
        raise _unauthorized("Invalid token type")

    try:
        account_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("Could not validate credentials")

    account = await get_account(session, account_id)
    if account is None:
        raise _unauthorized("Could not validate credentials")
    return account


async def get_current_account(account: Optional[Account] = Depends(get_optional_account)) -> Account:
    if account is None:
        raise AuthenticationRequiredError()
    return account


async def get_caller(account: Optional[Account] = Depends(get_optional_account)) -> Optional[Caller]:
    return Caller.from_account(account) if account else None


def require(action: Action):
    """
    Dependency gating an endpoint on an action that has no target resource.

    Args:
        action: Action the endpoint performs

    Returns:
        Dependency function yielding the authorised caller
    """
    async def checker(caller: Optional[Caller] = Depends(get_caller)) -> Caller:
        authorize(caller, action)
        return caller
    return checker
