from pydantic import ConfigDict, Field, StrictInt, computed_field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from digitalhouse.core.time_utils import to_utc
from digitalhouse.models.help_request import (
    HelpRequestStatus,
    HelpRequestType,
    MIN_URGENCY,
    MAX_URGENCY,
)
from digitalhouse.schemas.common import CamelModel
from digitalhouse.schemas.user import UserSummary


def urgency_label(level: int) -> str:
    if level >= 4:
        return "Critical"
    if level >= 3:
        return "High"
    if level >= 2:
        return "Medium"
    return "Low"


class HelpRequestCreate(CamelModel):
    """
    Body of POST /help-requests.
    The requester comes from the session and status is always active,
    so neither is accepted here.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    type: HelpRequestType
    location: Optional[str] = Field(None, max_length=255)
    urgency_level: StrictInt = Field(MIN_URGENCY, ge=MIN_URGENCY, le=MAX_URGENCY)

    @field_validator("location")
    @classmethod
    def blank_location_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class EmergencyHelpRequestCreate(CamelModel):
    """Emergency button form: urgency is fixed server-side, type defaults to medical."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    type: HelpRequestType = HelpRequestType.MEDICAL
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("location")
    @classmethod
    def blank_location_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class HelpRequestStatusUpdate(CamelModel):
    status: HelpRequestStatus


class HelpResponseCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1)


class HelpRequestOut(CamelModel):
    id: UUID
    requester_id: UUID
    title: str
    description: str
    type: HelpRequestType
    location: Optional[str] = None
    urgency_level: int
    status: HelpRequestStatus
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return to_utc(v)

    @computed_field(alias="urgencyLabel")
    @property
    def urgency_label(self) -> str:
        return urgency_label(self.urgency_level)


class HelpRequestListItem(HelpRequestOut):
    requester: Optional[UserSummary] = None


class HelpResponseOut(CamelModel):
    id: UUID
    help_request_id: UUID
    responder_id: UUID
    message: str
    is_accepted: bool
    created_at: datetime
    responder: Optional[UserSummary] = None

    @field_validator("created_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        return to_utc(v)


class HelpRequestDetail(HelpRequestListItem):
    responses: List[HelpResponseOut] = []
