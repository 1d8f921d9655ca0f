"""User domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from marketplace.domain.value_objects.user_role import UserRole


@dataclass
class User:
    """Marketplace account."""

    username: str
    email: str
    id: UUID = field(default_factory=uuid4)
    role: UserRole = UserRole.CUSTOMER
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.username or not self.username.strip():
            raise ValueError("Username is required")
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return name or self.username

    def is_contractor(self) -> bool:
        """Check if the user may do contractor work."""
        return self.role.is_contractor()
