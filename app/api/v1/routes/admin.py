"""Administrator routes. Every endpoint is gated on an admin-only action."""
import uuid
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.api.params import RowId
from app.schemas import AccountCreate, AccountOut, DashboardOut, EventOut, OrganiserOut
from app.db.session import get_session
from app.services.admin_service import AdminService
from app.services.policy import Action
from app.auth import require

router = APIRouter(prefix="/admin", tags=["admin"])


def get_admin_service(session: AsyncSession = Depends(get_session)) -> AdminService:
    return AdminService(session)


@router.get("/dashboard", response_model=DashboardOut, dependencies=[Depends(require(Action.VIEW_DASHBOARD))])
async def dashboard(admin_service: AdminService = Depends(get_admin_service)):
    """Totals for events, organisers and guests, plus the next five upcoming events."""
    return await admin_service.dashboard()


@router.post(
    "/organisers",
    response_model=AccountOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require(Action.CREATE_ORGANISER))],
)
async def create_organiser(
    payload: AccountCreate,
    admin_service: AdminService = Depends(get_admin_service)
):
    return await admin_service.create_organiser(payload)


@router.get("/organisers", response_model=List[OrganiserOut], dependencies=[Depends(require(Action.LIST_ORGANISERS))])
async def list_organisers(admin_service: AdminService = Depends(get_admin_service)):
    return await admin_service.list_organisers()


@router.get("/events", response_model=List[EventOut], dependencies=[Depends(require(Action.LIST_ALL_EVENTS))])
async def list_all_events(admin_service: AdminService = Depends(get_admin_service)):
    """Every event in the system, newest created first."""
    return await admin_service.list_all_events()


@router.delete(
    "/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require(Action.DELETE_ANY_EVENT))],
)
async def delete_event(event_id: RowId, admin_service: AdminService = Depends(get_admin_service)):
    await admin_service.delete_event(event_id)
    return None


@router.delete(
    "/organisers/{account_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require(Action.DELETE_ORGANISER))],
)
async def delete_organiser(account_id: uuid.UUID, admin_service: AdminService = Depends(get_admin_service)):
    """Delete an organiser together with their events and those events' guests."""
    await admin_service.delete_organiser(account_id)
    return None
