import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import enum
from digitalhouse.db.base_class import Base

class UserType(str, enum.Enum):
    MEMBER = 'member'
    MODERATOR = 'moderator'
    ADMIN = 'admin'

class User(Base):
    """
    Community member. Owned by the account service; the help desk reads it
    for identity and for the display fields joined onto requests.
    """
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    profile_image_url = Column(String(512), nullable=True)
    location = Column(String(255), nullable=True)
    user_type = Column(
        Enum(UserType, name="user_type", values_callable=lambda e: [m.value for m in e]),
        default=UserType.MEMBER,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc), nullable=False)

    help_requests = relationship("HelpRequest", back_populates="requester")

    @property
    def is_staff(self) -> bool:
        return self.user_type in (UserType.MODERATOR, UserType.ADMIN)
