"""Replace availability use case."""

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any, List, Optional
from uuid import UUID

from marketplace.application.interfaces.repositories import (
    AvailabilityRepositoryInterface,
    UserRepositoryInterface,
)
from marketplace.config.logging import get_logger
from marketplace.domain.entities.availability_slot import AvailabilitySlot
from marketplace.domain.exceptions.authorization_error import NotAContractorError
from marketplace.domain.value_objects.day_of_week import DayOfWeek
from marketplace.infrastructure.database.repositories.transaction_repository import (
    TransactionService,
)

logger = get_logger(__name__)

TIME_FORMATS = ("%H:%M", "%H:%M:%S")


@dataclass
class AvailabilityInput:
    """One submitted availability entry, as received."""

    day_of_week: Any = None
    start_time: Any = None
    end_time: Any = None
    is_available: Any = None


@dataclass
class ReplaceAvailabilityRequest:
    """Request for replacing a contractor's weekly availability."""

    contractor_id: UUID
    slots: List[AvailabilityInput] = field(default_factory=list)


@dataclass
class ReplaceAvailabilityResult:
    """Result of an availability save."""

    slots: List[AvailabilitySlot]
    dropped: int

    @property
    def saved(self) -> int:
        return len(self.slots)


def parse_time(value: Any) -> Optional[time]:
    """Parse 'HH:MM' (seconds tolerated) into a time, or None."""
    if not value:
        return None
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(str(value).strip(), fmt).time().replace(second=0)
        except ValueError:
            continue
    return None


class ReplaceAvailabilityUseCase:
    """Replace all of a contractor's availability; bad entries are dropped."""

    def __init__(
        self,
        availability_repo: AvailabilityRepositoryInterface,
        user_repo: UserRepositoryInterface,
        transaction_service: TransactionService,
    ):
        self.availability_repo = availability_repo
        self.user_repo = user_repo
        self.transaction_service = transaction_service

    async def execute(
        self, request: ReplaceAvailabilityRequest
    ) -> ReplaceAvailabilityResult:
        """Validate entries and swap in the new set."""
        contractor = await self.user_repo.get_by_id(request.contractor_id)
        if not contractor or not contractor.is_contractor():
            raise NotAContractorError(str(request.contractor_id))

        valid = [
            slot
            for slot in (
                self.to_slot(request.contractor_id, item) for item in request.slots
            )
            if slot is not None
        ]
        dropped = len(request.slots) - len(valid)

        saved = await self.transaction_service.execute_in_transaction(
            lambda: self.availability_repo.replace_for_contractor(
                request.contractor_id, valid
            )
        )

        logger.info(
            "Availability replaced",
            contractor_id=str(request.contractor_id),
            saved=len(saved),
            dropped=dropped,
        )
        return ReplaceAvailabilityResult(
            slots=sorted(saved, key=AvailabilitySlot.sort_key), dropped=dropped
        )

    def to_slot(
        self, contractor_id: UUID, item: AvailabilityInput
    ) -> Optional[AvailabilitySlot]:
        """Build a slot from a submitted entry, or None if it is unusable."""
        day = DayOfWeek.parse(item.day_of_week)
        start = parse_time(item.start_time)
        end = parse_time(item.end_time)

        if day is None or start is None or end is None or start >= end:
            logger.debug(
                "Dropping availability entry",
                contractor_id=str(contractor_id),
                day_of_week=item.day_of_week,
                start_time=item.start_time,
                end_time=item.end_time,
            )
            return None

        return AvailabilitySlot(
            contractor_id=contractor_id,
            day_of_week=day,
            start_time=start,
            end_time=end,
            is_available=item.is_available is not False,
        )
