"""
Help desk models.

A HelpRequest is a member's posted need for assistance; HelpResponse rows are
offers of help from other members. Requests are never deleted.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, Enum, Text, CheckConstraint, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum

from digitalhouse.db.base_class import Base

MIN_URGENCY = 1
MAX_URGENCY = 5
EMERGENCY_URGENCY = 4


def _utcnow():
    return datetime.now(timezone.utc)


def _values(enum_cls):
    return [m.value for m in enum_cls]


class HelpRequestType(str, enum.Enum):
    MEDICAL = 'medical'
    TRAVEL = 'travel'
    SAFETY = 'safety'
    OTHER = 'other'

class HelpRequestStatus(str, enum.Enum):
    ACTIVE = 'active'
    RESOLVED = 'resolved'
    CLOSED = 'closed'

    def can_transition_to(self, target: "HelpRequestStatus") -> bool:
        # active is the only state with outgoing edges
        return self is HelpRequestStatus.ACTIVE and target is not HelpRequestStatus.ACTIVE


class HelpRequest(Base):
    __tablename__ = "help_requests"
    __table_args__ = (
        CheckConstraint(
            f"urgency_level BETWEEN {MIN_URGENCY} AND {MAX_URGENCY}",
            name="ck_help_requests_urgency_level",
        ),
        Index("ix_help_requests_listing", "status", "urgency_level", "created_at"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    requester_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(Enum(HelpRequestType, name="help_request_type", values_callable=_values), nullable=False)
    location = Column(String(255), nullable=True)
    urgency_level = Column(Integer, default=MIN_URGENCY, nullable=False)
    status = Column(
        Enum(HelpRequestStatus, name="help_request_status", values_callable=_values),
        default=HelpRequestStatus.ACTIVE,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    requester = relationship("User", back_populates="help_requests")
    responses = relationship(
        "HelpResponse",
        back_populates="help_request",
        order_by="HelpResponse.created_at",
    )


class HelpResponse(Base):
    """
    An offer of help on a request. A member may respond more than once.
    """
    __tablename__ = "help_responses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    help_request_id = Column(UUID(as_uuid=True), ForeignKey("help_requests.id"), nullable=False, index=True)
    responder_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    message = Column(Text, nullable=False)
    is_accepted = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    help_request = relationship("HelpRequest", back_populates="responses")
    responder = relationship("User")
