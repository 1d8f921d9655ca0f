"""
Availability-related API schemas.
"""

from datetime import time
from typing import Any, Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field

from marketplace.application.use_cases.replace_availability import AvailabilityInput
from marketplace.domain.entities.availability_slot import AvailabilitySlot

from .common import BaseResponse


class AvailabilityItem(BaseModel):
    """
    One submitted weekly window.

    Fields are loosely typed on purpose: malformed entries are dropped
    by the use case instead of failing the whole request.
    """

    day_of_week: Optional[Any] = Field(
        None, validation_alias=AliasChoices("day_of_week", "dayOfWeek")
    )
    start_time: Optional[Any] = Field(
        None, validation_alias=AliasChoices("start_time", "startTime")
    )
    end_time: Optional[Any] = Field(
        None, validation_alias=AliasChoices("end_time", "endTime")
    )
    is_available: Optional[Any] = Field(
        None, validation_alias=AliasChoices("is_available", "isAvailable")
    )

    def to_input(self) -> AvailabilityInput:
        return AvailabilityInput(
            day_of_week=self.day_of_week,
            start_time=self.start_time,
            end_time=self.end_time,
            is_available=self.is_available,
        )


class AvailabilityReplaceRequest(BaseModel):
    """Full replacement set of a contractor's availability."""

    availability: list[AvailabilityItem]


class AvailabilitySlotResponse(BaseModel):
    """Stored availability slot."""

    id: UUID
    day_of_week: str
    start_time: time
    end_time: time
    duration_minutes: int
    is_available: bool

    @classmethod
    def from_entity(cls, slot: AvailabilitySlot) -> "AvailabilitySlotResponse":
        return cls(
            id=slot.id,
            day_of_week=slot.day_of_week.value,
            start_time=slot.start_time,
            end_time=slot.end_time,
            duration_minutes=slot.duration_minutes,
            is_available=slot.is_available,
        )


class AvailabilityResponse(BaseResponse):
    """Availability listing or save result."""

    availability: list[AvailabilitySlotResponse] = Field(default_factory=list)
    saved: Optional[int] = None
    dropped: Optional[int] = None
