"""
Startup bootstrap: make sure both roles and the default administrator exist.

Every step is guarded by an existence check, so running it again is a no-op.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging import logger
from app.db.models.role import ADMIN_ROLE, ORGANISER_ROLE
from app.db.repositories import create_account, create_role, get_account_by_email, role_exists


async def seed_roles_and_admin(session: AsyncSession) -> None:
    for name in (ADMIN_ROLE, ORGANISER_ROLE):
        if not await role_exists(session, name):
            await create_role(session, name)
            logger.info(f"{name} role created")

    if await get_account_by_email(session, settings.ADMIN_EMAIL):
        logger.info("Admin user already exists")
        return

    await create_account(
        session,
        email=settings.ADMIN_EMAIL,
        full_name=settings.ADMIN_FULL_NAME,
        password=settings.ADMIN_PASSWORD,
        roles=[ADMIN_ROLE],
    )
    logger.info(f"Default admin user created: {settings.ADMIN_EMAIL}")
