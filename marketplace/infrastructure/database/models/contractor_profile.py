"""
Contractor profile SQLAlchemy model.
"""

from sqlalchemy import JSON, Boolean, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from .base import BaseModel


class ContractorProfileModel(BaseModel):
    """Contractor profile database model."""

    __tablename__ = "contractor_profiles"

    user_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    business_name = Column(String(255))
    skills = Column(JSON, default=list, nullable=False)
    specialties = Column(JSON, default=list, nullable=False)
    preferred_job_types = Column(JSON, default=list, nullable=False)
    service_zip_codes = Column(JSON, default=list, nullable=False)
    service_radius = Column(Integer, default=25, nullable=False)
    minimum_job_value = Column(Numeric(precision=10, scale=2))
    accept_auto_assignment = Column(Boolean, default=True, nullable=False, index=True)
    auto_call_enabled = Column(Boolean, default=True, nullable=False)
    years_in_business = Column(Integer)
    bonded_and_insured = Column(Boolean, default=False, nullable=False)
    preferred_contact_time = Column(String(50))

    # Relationships
    user = relationship("UserModel", back_populates="contractor_profile")

    def __repr__(self) -> str:
        return f"<ContractorProfile(id={self.id}, user_id={self.user_id})>"
