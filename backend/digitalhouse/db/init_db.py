"""
Create the help desk tables and load sample community data for development.

    python -m digitalhouse.db.init_db

Prints a bearer token per sample member so the API can be exercised
without the account service.
"""

import asyncio
import structlog
from sqlalchemy import select

from digitalhouse.core import security
from digitalhouse.core.logging import setup_logging
from digitalhouse.core.time_utils import get_utc_now
from digitalhouse.db.base import Base
from digitalhouse.db.session import engine, AsyncSessionLocal
from digitalhouse.models.user import User, UserType
from digitalhouse.models.help_request import HelpRequest, HelpRequestType

logger = structlog.get_logger()

SAMPLE_USERS = [
    {"email": "priya.raman@example.com", "first_name": "Priya", "last_name": "Raman",
     "location": "San Francisco, CA", "user_type": UserType.ADMIN},
    {"email": "arjun.kumar@example.com", "first_name": "Arjun", "last_name": "Kumar",
     "location": "Chennai, India", "user_type": UserType.MODERATOR},
    {"email": "lakshmi.devi@example.com", "first_name": "Lakshmi", "last_name": "Devi",
     "location": "Toronto, ON, Canada", "user_type": UserType.MEMBER},
    {"email": "karthik.s@example.com", "first_name": "Karthik", "last_name": "Subramanian",
     "location": "London, UK", "user_type": UserType.MEMBER},
]

# requester is an index into SAMPLE_USERS
SAMPLE_HELP_REQUESTS = [
    {
        "requester": 2,
        "title": "Blood Donation Urgent - O+ Needed",
        "description": "Community member's father needs urgent blood transfusion. O+ blood type "
                       "required at Toronto General Hospital. Please contact immediately if you can help.",
        "type": HelpRequestType.MEDICAL,
        "location": "Toronto, ON, Canada",
        "urgency_level": 5,
    },
    {
        "requester": 3,
        "title": "Airport Pickup Help in London",
        "description": "Elderly couple arriving at Heathrow tomorrow at 2 PM. Their son got delayed "
                       "due to work emergency. Can someone help with pickup and drop at hotel?",
        "type": HelpRequestType.TRAVEL,
        "location": "London Heathrow Airport",
        "urgency_level": 3,
    },
    {
        "requester": 0,
        "title": "Temporary Housing for Student",
        "description": "Student from Chennai coming for 3-month internship in SF. Looking for temporary "
                       "accommodation or host family.",
        "type": HelpRequestType.OTHER,
        "location": "San Francisco Bay Area",
        "urgency_level": 2,
    },
]


async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db_tables_created")


async def seed_sample_data():
    async with AsyncSessionLocal() as session:
        users = []
        for data in SAMPLE_USERS:
            result = await session.execute(select(User).where(User.email == data["email"]))
            user = result.scalar_one_or_none()
            if user is None:
                user = User(**data)
                session.add(user)
            users.append(user)
        await session.flush()

        existing = await session.execute(select(HelpRequest.id).limit(1))
        if existing.scalar_one_or_none() is None:
            for data in SAMPLE_HELP_REQUESTS:
                fields = {k: v for k, v in data.items() if k != "requester"}
                now = get_utc_now()
                session.add(HelpRequest(
                    requester_id=users[data["requester"]].id, created_at=now, updated_at=now, **fields
                ))
            logger.info("sample_help_requests_created", count=len(SAMPLE_HELP_REQUESTS))
        else:
            logger.info("sample_help_requests_skipped", reason="help_requests not empty")

        await session.commit()

        for user in users:
            print(f"{user.email} ({user.user_type.value}): {security.create_access_token(user.id)}")


async def main():
    await create_tables()
    await seed_sample_data()
    await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(main())
