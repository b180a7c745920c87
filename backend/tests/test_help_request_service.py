import unittest
import uuid
from unittest.mock import patch

from sqlalchemy import func, select

from digitalhouse.core.exceptions import (
    InvalidStatusTransitionError,
    NotFoundError,
    PermissionDeniedError,
)
from digitalhouse.models.help_request import (
    HelpRequestStatus,
    HelpRequestType,
    HelpResponse,
)
from digitalhouse.models.user import UserType
from digitalhouse.schemas.help_request import EmergencyHelpRequestCreate, HelpRequestCreate
from digitalhouse.services.help_request_service import HelpRequestService
from tests.base import DatabaseTestCase


class TestHelpRequestService(DatabaseTestCase):

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.requester = await self.make_user("Lakshmi", location="Toronto, ON, Canada")
        self.helper = await self.make_user("Karthik")

    async def test_create_forces_active(self):
        payload = HelpRequestCreate(
            title="Blood donation", description="O+ needed", type=HelpRequestType.MEDICAL, urgency_level=5
        )
        async with self.Session() as session:
            help_request = await HelpRequestService.create(session, self.requester, payload)

        self.assertEqual(help_request.status, HelpRequestStatus.ACTIVE)
        self.assertEqual(help_request.requester_id, self.requester.id)
        self.assertEqual(help_request.urgency_level, 5)
        self.assertIsNotNone(help_request.created_at)
        self.assertEqual(help_request.created_at, help_request.updated_at)

    async def test_create_emergency_pins_urgency_and_falls_back_to_profile_location(self):
        payload = EmergencyHelpRequestCreate(title="Accident", description="Need ambulance")
        async with self.Session() as session:
            help_request = await HelpRequestService.create_emergency(session, self.requester, payload)

        self.assertEqual(help_request.urgency_level, 4)
        self.assertEqual(help_request.type, HelpRequestType.MEDICAL)
        self.assertEqual(help_request.location, "Toronto, ON, Canada")

    async def test_list_active_loads_requester(self):
        await self.insert_help_request(self.requester, urgency_level=2)
        async with self.Session() as session:
            items = await HelpRequestService.list_active(session, limit=10)
        self.assertEqual(len(items), 1)
        self.assertEqual(items[0].requester.first_name, "Lakshmi")

    async def test_respond_to_missing_request(self):
        async with self.Session() as session:
            with self.assertRaises(NotFoundError):
                await HelpRequestService.respond(session, uuid.uuid4(), self.helper, "hi")

    async def test_same_member_may_respond_twice(self):
        help_request = await self.insert_help_request(self.requester)
        async with self.Session() as session:
            await HelpRequestService.respond(session, help_request.id, self.helper, "one")
            await HelpRequestService.respond(session, help_request.id, self.helper, "two")
            count = await session.scalar(select(func.count()).select_from(HelpResponse))
        self.assertEqual(count, 2)

    async def test_update_status_rules(self):
        admin = await self.make_user("Priya", user_type=UserType.ADMIN)
        first = await self.insert_help_request(self.requester, title="first")
        second = await self.insert_help_request(self.requester, title="second")

        async with self.Session() as session:
            with self.assertRaises(PermissionDeniedError):
                await HelpRequestService.update_status(session, first.id, self.helper, HelpRequestStatus.RESOLVED)

            resolved = await HelpRequestService.update_status(
                session, first.id, self.requester, HelpRequestStatus.RESOLVED
            )
            self.assertEqual(resolved.status, HelpRequestStatus.RESOLVED)

            with self.assertRaises(InvalidStatusTransitionError):
                await HelpRequestService.update_status(session, first.id, admin, HelpRequestStatus.CLOSED)

            closed = await HelpRequestService.update_status(session, second.id, admin, HelpRequestStatus.CLOSED)
            self.assertEqual(closed.status, HelpRequestStatus.CLOSED)

            with self.assertRaises(NotFoundError):
                await HelpRequestService.update_status(session, uuid.uuid4(), admin, HelpRequestStatus.CLOSED)

    async def test_accept_response(self):
        help_request = await self.insert_help_request(self.requester)
        async with self.Session() as session:
            response = await HelpRequestService.respond(session, help_request.id, self.helper, "I can help")

        async with self.Session() as session:
            accepted = await HelpRequestService.accept_response(
                session, help_request.id, response.id, self.requester
            )
            self.assertTrue(accepted.is_accepted)

            with self.assertRaises(NotFoundError):
                await HelpRequestService.accept_response(session, help_request.id, uuid.uuid4(), self.requester)

            refreshed = await HelpRequestService.get(session, help_request.id, with_responses=True)
            self.assertEqual(refreshed.status, HelpRequestStatus.ACTIVE)
            self.assertEqual([r.is_accepted for r in refreshed.responses], [True])

    async def test_status_change_loses_to_earlier_commit(self):
        moderator = await self.make_user("Arjun", user_type=UserType.MODERATOR)
        help_request = await self.insert_help_request(self.requester)

        real_get = HelpRequestService.get

        async with self.Session() as first, self.Session() as second:
            # second read the row while it was still active
            stale = await real_get(second, help_request.id)
            reads = []

            async def stale_first_read(session, help_request_id, with_responses=False):
                reads.append(help_request_id)
                if len(reads) == 1:
                    return stale
                return await real_get(session, help_request_id, with_responses)

            await HelpRequestService.update_status(first, help_request.id, moderator, HelpRequestStatus.CLOSED)
            with patch.object(HelpRequestService, "get", side_effect=stale_first_read):
                with self.assertRaises(InvalidStatusTransitionError) as ctx:
                    await HelpRequestService.update_status(
                        second, help_request.id, self.requester, HelpRequestStatus.RESOLVED
                    )
            self.assertIn("from closed", ctx.exception.detail)

        async with self.Session() as session:
            stored = await HelpRequestService.get(session, help_request.id)
        self.assertEqual(stored.status, HelpRequestStatus.CLOSED)


class TestStatusTransitionTable(unittest.TestCase):

    def test_only_active_has_outgoing_transitions(self):
        active = HelpRequestStatus.ACTIVE
        self.assertTrue(active.can_transition_to(HelpRequestStatus.RESOLVED))
        self.assertTrue(active.can_transition_to(HelpRequestStatus.CLOSED))
        self.assertFalse(active.can_transition_to(HelpRequestStatus.ACTIVE))
        for source in (HelpRequestStatus.RESOLVED, HelpRequestStatus.CLOSED):
            for target in HelpRequestStatus:
                self.assertFalse(source.can_transition_to(target))
