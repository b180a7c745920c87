"""
Community Help Desk API.

Members post requests for assistance, others respond, and the requester
resolves or closes the request once help has arrived.
"""

from typing import List, Optional
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from digitalhouse.api.deps import get_current_user, require_feature
from digitalhouse.core.config import settings
from digitalhouse.db.session import get_db
from digitalhouse.models.user import User
from digitalhouse.schemas.common import DataResponse, MessageResponse
from digitalhouse.schemas.help_request import (
    EmergencyHelpRequestCreate,
    HelpRequestCreate,
    HelpRequestDetail,
    HelpRequestListItem,
    HelpRequestOut,
    HelpRequestStatusUpdate,
    HelpResponseCreate,
    HelpResponseOut,
)
from digitalhouse.services.help_request_service import HelpRequestService

router = APIRouter(dependencies=[Depends(require_feature("help_desk"))])


def pagination(
    limit: Optional[int] = Query(None, ge=1, le=settings.HELP_REQUESTS_MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
) -> dict:
    return {
        "limit": limit or settings.HELP_REQUESTS_PAGE_SIZE,
        "offset": offset,
    }


@router.post("", response_model=DataResponse[HelpRequestOut])
async def create_help_request(
    payload: HelpRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Post a new help request. It always starts out active.
    """
    help_request = await HelpRequestService.create(db, current_user, payload)
    return {"data": help_request, "message": "Help request created successfully"}


@router.get("", response_model=DataResponse[List[HelpRequestListItem]])
async def list_active_help_requests(
    page: dict = Depends(pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Active requests, most urgent and most recent first.
    """
    help_requests = await HelpRequestService.list_active(db, **page)
    return {"data": help_requests}


@router.post(
    "/emergency",
    response_model=DataResponse[HelpRequestOut],
    dependencies=[Depends(require_feature("emergency"))],
)
async def create_emergency_help_request(
    payload: EmergencyHelpRequestCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    help_request = await HelpRequestService.create_emergency(db, current_user, payload)
    return {"data": help_request, "message": "Emergency help request created successfully"}


@router.get("/mine", response_model=DataResponse[List[HelpRequestListItem]])
async def list_my_help_requests(
    page: dict = Depends(pagination),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    help_requests = await HelpRequestService.list_for_requester(db, current_user.id, **page)
    return {"data": help_requests}


@router.get("/{help_request_id}", response_model=DataResponse[HelpRequestDetail])
async def read_help_request(
    help_request_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    help_request = await HelpRequestService.get(db, help_request_id, with_responses=True)
    return {"data": help_request}


@router.post("/{help_request_id}/respond", response_model=MessageResponse)
async def respond_to_help_request(
    help_request_id: uuid.UUID,
    payload: HelpResponseCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    await HelpRequestService.respond(db, help_request_id, current_user, payload.message)
    return {"message": "Response sent successfully"}


@router.patch("/{help_request_id}/status", response_model=DataResponse[HelpRequestOut])
async def update_help_request_status(
    help_request_id: uuid.UUID,
    payload: HelpRequestStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Resolve or close an active request. Requester, moderators and admins only.
    """
    help_request = await HelpRequestService.update_status(
        db, help_request_id, current_user, payload.status
    )
    return {"data": help_request, "message": f"Help request {help_request.status.value}"}


@router.post(
    "/{help_request_id}/responses/{response_id}/accept",
    response_model=DataResponse[HelpResponseOut],
)
async def accept_help_response(
    help_request_id: uuid.UUID,
    response_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    response = await HelpRequestService.accept_response(
        db, help_request_id, response_id, current_user
    )
    return {"data": response, "message": "Response accepted"}
