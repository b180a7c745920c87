from typing import List
import uuid

from sqlalchemy import select, desc, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload
import structlog

from digitalhouse.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from digitalhouse.core.time_utils import get_utc_now
from digitalhouse.models.help_request import (
    EMERGENCY_URGENCY,
    HelpRequest,
    HelpRequestStatus,
    HelpResponse,
)
from digitalhouse.models.user import User
from digitalhouse.schemas.help_request import (
    EmergencyHelpRequestCreate,
    HelpRequestCreate,
)

logger = structlog.get_logger()


class HelpRequestService:
    """
    Data access and rules for the community help desk.

    Every method works inside the caller's session; writes commit before
    returning so each API call is its own transaction.
    """

    @classmethod
    async def create(
        cls, session: AsyncSession, requester: User, payload: HelpRequestCreate
    ) -> HelpRequest:
        now = get_utc_now()
        help_request = HelpRequest(
            requester_id=requester.id,
            title=payload.title,
            description=payload.description,
            type=payload.type,
            location=payload.location,
            urgency_level=payload.urgency_level,
            status=HelpRequestStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        session.add(help_request)
        await session.commit()
        await session.refresh(help_request)

        logger.info(
            "help_request_created",
            help_request_id=str(help_request.id),
            requester_id=str(requester.id),
            type=help_request.type.value,
            urgency_level=help_request.urgency_level,
        )
        return help_request

    @classmethod
    async def create_emergency(
        cls, session: AsyncSession, requester: User, payload: EmergencyHelpRequestCreate
    ) -> HelpRequest:
        """
        Emergency button path. Same validation and storage as a regular request,
        only the urgency is pinned and the location falls back to the profile.
        """
        regular = HelpRequestCreate(
            title=payload.title,
            description=payload.description,
            type=payload.type,
            location=payload.location or requester.location,
            urgency_level=EMERGENCY_URGENCY,
        )
        return await cls.create(session, requester, regular)

    @classmethod
    async def list_active(
        cls, session: AsyncSession, limit: int, offset: int = 0
    ) -> List[HelpRequest]:
        """
        Active requests, most urgent first and newest first within an urgency level.
        """
        stmt = (
            select(HelpRequest)
            .options(joinedload(HelpRequest.requester))
            .where(HelpRequest.status == HelpRequestStatus.ACTIVE)
            .order_by(desc(HelpRequest.urgency_level), desc(HelpRequest.created_at), HelpRequest.id)
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def list_for_requester(
        cls, session: AsyncSession, requester_id: uuid.UUID, limit: int, offset: int = 0
    ) -> List[HelpRequest]:
        stmt = (
            select(HelpRequest)
            .options(joinedload(HelpRequest.requester))
            .where(HelpRequest.requester_id == requester_id)
            .order_by(desc(HelpRequest.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def get(
        cls, session: AsyncSession, help_request_id: uuid.UUID, with_responses: bool = False
    ) -> HelpRequest:
        options = [joinedload(HelpRequest.requester)]
        if with_responses:
            options.append(
                selectinload(HelpRequest.responses).joinedload(HelpResponse.responder)
            )
        stmt = (
            select(HelpRequest)
            .options(*options)
            .where(HelpRequest.id == help_request_id)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        help_request = result.scalar_one_or_none()
        if help_request is None:
            raise NotFoundError("Help request not found")
        return help_request

    @classmethod
    async def respond(
        cls,
        session: AsyncSession,
        help_request_id: uuid.UUID,
        responder: User,
        message: str,
    ) -> HelpResponse:
        """
        Record an offer of help. The parent request is left untouched.
        """
        exists = await session.execute(
            select(HelpRequest.id).where(HelpRequest.id == help_request_id)
        )
        if exists.scalar_one_or_none() is None:
            raise NotFoundError("Help request not found")

        response = HelpResponse(
            help_request_id=help_request_id,
            responder_id=responder.id,
            message=message,
            is_accepted=False,
        )
        session.add(response)
        await session.commit()

        logger.info(
            "help_response_created",
            help_request_id=str(help_request_id),
            responder_id=str(responder.id),
            help_response_id=str(response.id),
        )
        return response

    @classmethod
    async def update_status(
        cls,
        session: AsyncSession,
        help_request_id: uuid.UUID,
        actor: User,
        new_status: HelpRequestStatus,
    ) -> HelpRequest:
        """
        Move an active request to resolved or closed.

        The write is a conditional UPDATE on status = active, so of two
        concurrent changes only the first lands and the second gets a 409.
        """
        help_request = await cls.get(session, help_request_id)

        if help_request.requester_id != actor.id and not actor.is_staff:
            raise PermissionDeniedError("Only the requester or a moderator can change this request")

        current = help_request.status
        if not current.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                f"Cannot change status from {current.value} to {new_status.value}"
            )

        stmt = (
            update(HelpRequest)
            .where(
                HelpRequest.id == help_request_id,
                HelpRequest.status == HelpRequestStatus.ACTIVE,
            )
            .values(status=new_status, updated_at=get_utc_now())
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        if result.rowcount == 0:
            await session.rollback()
            current = (await cls.get(session, help_request_id)).status
            raise InvalidStatusTransitionError(
                f"Cannot change status from {current.value} to {new_status.value}"
            )
        await session.commit()
        help_request = await cls.get(session, help_request_id)

        logger.info(
            "help_request_status_changed",
            help_request_id=str(help_request.id),
            actor_id=str(actor.id),
            from_status=current.value,
            to_status=new_status.value,
        )
        return help_request

    @classmethod
    async def accept_response(
        cls,
        session: AsyncSession,
        help_request_id: uuid.UUID,
        response_id: uuid.UUID,
        actor: User,
    ) -> HelpResponse:
        """
        Mark a response as accepted by the requester. Accepting again is a no-op
        and the request keeps its status.
        """
        help_request = await cls.get(session, help_request_id)
        if help_request.requester_id != actor.id:
            raise PermissionDeniedError("Only the requester can accept a response")

        stmt = (
            select(HelpResponse)
            .options(joinedload(HelpResponse.responder))
            .where(
                HelpResponse.id == response_id,
                HelpResponse.help_request_id == help_request_id,
            )
        )
        result = await session.execute(stmt)
        response = result.scalar_one_or_none()
        if response is None:
            raise NotFoundError("Help response not found")

        if not response.is_accepted:
            response.is_accepted = True
            await session.commit()
            logger.info(
                "help_response_accepted",
                help_request_id=str(help_request_id),
                help_response_id=str(response_id),
            )
        return response
