"""Authentication routes: registration, login, logout, token refresh and page metadata."""
from typing import Optional
from fastapi import APIRouter, Depends, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from app.schemas import (
    AccountCreate,
    AccountOut,
    AuthPageOut,
    LoginRequest,
    MessageOut,
    RefreshTokenRequest,
    RegisterResponse,
    Token,
    TokenResponse,
)
from app.services.auth_service import AuthService
from app.db.session import get_session
from app.db.models import Account
from app.auth import get_current_account, security
from app.core.rate_limit import limiter
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)


@router.get("/register", response_model=AuthPageOut)
async def register_page():
    return AuthPageOut(page="register", fields=["full_name", "email", "password", "confirm_password"])


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
async def register(
    request: Request,
    payload: AccountCreate,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new organiser account and sign it in.

    Rate limit: 3 requests per minute

    Raises:
        400 if the password is weak, 409 if the email is already registered
    """
    return await auth_service.register(payload)


@router.get("/login", response_model=AuthPageOut)
async def login_page():
    return AuthPageOut(page="login", fields=["email", "password", "remember_me"])


@router.post("/login", response_model=TokenResponse)
@limiter.limit("5/minute")
async def login(
    request: Request,
    form_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Login endpoint returning a session and the role-based landing target.

    Rate limit: 5 requests per minute

    Raises:
        401 on bad credentials, 423 while the account is locked out
    """
    return await auth_service.login(form_data)


@router.post("/refresh", response_model=Token)
@limiter.limit("10/minute")
async def refresh_access_token(
    request: Request,
    payload: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.refresh_access_token(payload.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    current_account: Account = Depends(get_current_account),
    auth_service: AuthService = Depends(get_auth_service)
):
    """Logout by revoking the current access token."""
    await auth_service.logout(credentials.credentials if credentials else None)
    return None


@router.get("/me", response_model=AccountOut)
async def get_current_account_info(current_account: Account = Depends(get_current_account)):
    return current_account


@router.get("/access-denied", response_model=MessageOut)
async def access_denied():
    return MessageOut(message="You do not have permission to access this page.")
