"""
User role value object.
"""

from enum import Enum


class UserRole(str, Enum):
    """Marketplace user role."""

    CUSTOMER = "CUSTOMER"
    CONTRACTOR = "CONTRACTOR"
    BOTH = "BOTH"

    @classmethod
    def contractor_roles(cls) -> list["UserRole"]:
        """Roles allowed to do contractor work."""
        return [cls.CONTRACTOR, cls.BOTH]

    def is_contractor(self) -> bool:
        """Check if the role may claim jobs and publish availability."""
        return self in self.contractor_roles()
