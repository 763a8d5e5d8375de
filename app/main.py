from fastapi import FastAPI, Request, status, APIRouter
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from app.api.v1.routes import (
    admin as admin_router,
    auth as auth_router,
    events as events_router,
    health as health_router,
    public as public_router,
)
from app.api.routes import guests as guests_router
from app.db.session import engine, Base, AsyncSessionLocal
from app.db.seed import seed_roles_and_admin
from app.core.config import settings
from app.core.errors import DomainError, ErrorCode, ValidationError
from app.core.logging import logger
from app.core.rate_limit import limiter
from app.middleware.security_headers import SecurityHeadersMiddleware

ERROR_STATUS = {
    ErrorCode.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_CREDENTIAL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SCHEDULE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.ACCOUNT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.GUEST_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.AUTHENTICATION_REQUIRED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.BAD_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.NOT_OWNER: status.HTTP_403_FORBIDDEN,
    ErrorCode.INSUFFICIENT_ROLE: status.HTTP_403_FORBIDDEN,
    ErrorCode.LOCKED_OUT: status.HTTP_423_LOCKED,
}

app = FastAPI(title="EventPortal")

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    status_code = ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST)
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = [{"field": e.field, "message": e.message} for e in exc.errors]
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.opt(exception=exc).error(f"Store failure on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred."},
    )


api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth_router.router)
api_router.include_router(admin_router.router)
api_router.include_router(events_router.router)
api_router.include_router(public_router.router)
api_router.include_router(health_router.router)

app.include_router(api_router)
app.include_router(guests_router.router)


@app.on_event("startup")
async def on_startup():
    # create tables (migrations under alembic/ describe the same schema)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSessionLocal() as session:
        await seed_roles_and_admin(session)
    logger.info("EventPortal started")
