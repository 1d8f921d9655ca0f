"""
User SQLAlchemy model.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from marketplace.domain.value_objects.user_role import UserRole

from .base import BaseModel


class UserModel(BaseModel):
    """User database model."""

    __tablename__ = "users"

    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    phone_number = Column(String(30), index=True)
    address = Column(Text)
    role = Column(String(20), default=UserRole.CUSTOMER.value, nullable=False, index=True)

    # Relationships
    contractor_profile = relationship(
        "ContractorProfileModel", back_populates="user", uselist=False
    )
    availability_slots = relationship(
        "AvailabilitySlotModel",
        back_populates="contractor",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"
