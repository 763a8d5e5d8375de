"""Session and self-registration service: sign-up, login, token refresh and logout."""
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status
from app.schemas import AccountCreate, LoginRequest
from app.db.models import Account, ADMIN_ROLE, ORGANISER_ROLE
from app.db.repositories import create_account, verify_credential
from app.core.errors import AccountNotFoundError, BadCredentialError
from app.core.logging import logger
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    revoke_token,
)

ADMIN_LANDING = "/api/v1/admin/dashboard"
ORGANISER_LANDING = "/api/v1/events/"
DEFAULT_LANDING = "/"


def landing_for(account: Account) -> str:
    """Pick the post-login landing target from the account's roles."""
    if account.has_role(ADMIN_ROLE):
        return ADMIN_LANDING
    if account.has_role(ORGANISER_ROLE):
        return ORGANISER_LANDING
    return DEFAULT_LANDING


def _token_data(account: Account) -> Dict:
    return {"sub": str(account.id), "roles": sorted(account.role_names)}


class AuthService:
    """
    Service layer for authentication operations.

    Handles self-service registration, login, token refresh, and logout.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def register(self, payload: AccountCreate) -> Dict:
        """
        Register a new account and start a session for it.

        Self-registered accounts always get the Organiser role; there is no public
        path to Admin.

        Raises:
            WeakCredentialError, DuplicateEmailError
        """
        account = await create_account(
            self.session,
            email=payload.email,
            full_name=payload.full_name,
            password=payload.password,
            roles=[ORGANISER_ROLE],
        )
        logger.info(f"Account self-registered: {account.email}")
        return {
            "account": account,
            "access_token": create_access_token(_token_data(account)),
            "token_type": "bearer",
            "redirect_to": landing_for(account),
        }

    async def login(self, form_data: LoginRequest) -> Dict:
        """
        Authenticate and issue an access token, plus a refresh token when the
        caller asked to be remembered.

        Unknown emails and wrong passwords fail identically; a lockout is reported
        as such.

        Raises:
            BadCredentialError, LockedOutError
        """
        try:
            account = await verify_credential(self.session, form_data.email, form_data.password)
        except AccountNotFoundError:
            raise BadCredentialError()

        logger.info(f"Account logged in: {account.email}")
        token_data = _token_data(account)
        refresh_token: Optional[str] = None
        if form_data.remember_me:
            refresh_token = create_refresh_token(token_data)

        return {
            "access_token": create_access_token(token_data),
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "redirect_to": landing_for(account),
        }

    async def refresh_access_token(self, refresh_token: str) -> Dict:
        """
        Generate a new access token using a valid refresh token.

        Raises:
            HTTPException: If refresh token is invalid or of the wrong type
        """
        try:
            token_data = decode_token(refresh_token)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid refresh token"
            )

        if token_data.get("type") != "refresh":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token type"
            )

        access_token = create_access_token({"sub": token_data["sub"], "roles": token_data.get("roles", [])})
        return {"access_token": access_token, "token_type": "bearer"}

    async def logout(self, token: Optional[str]) -> None:
        """
        Revoke the presented access token, if any.

        Raises:
            HTTPException: 503 if the revocation list could not be written
        """
        if token and not await revoke_token(token):
            logger.error("Token revocation failed; session left active")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Logout is temporarily unavailable. Please try again."
            )
        logger.info("Session logged out")
