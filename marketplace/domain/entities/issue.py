"""Issue domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from marketplace.domain.value_objects.issue_status import IssueStatus
from marketplace.domain.value_objects.priority import Priority


@dataclass
class Issue:
    """Repair problem submitted by a customer."""

    customer_id: UUID
    title: str
    description: str
    id: UUID = field(default_factory=uuid4)
    priority: Priority = Priority.NORMAL
    status: IssueStatus = IssueStatus.SUBMITTED
    category: Optional[str] = None
    zip_code: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate issue data."""
        if not self.title or not self.title.strip():
            raise ValueError("Issue title is required")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = datetime.now(timezone.utc)

    @property
    def text(self) -> str:
        """Title and description joined for keyword scanning."""
        return f"{self.title} {self.description or ''}".strip()
