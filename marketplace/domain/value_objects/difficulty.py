"""
Job difficulty value object.
"""

from enum import Enum
from typing import Optional


class DifficultyLevel(str, Enum):
    """AI-assessed difficulty of a repair."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["DifficultyLevel"]:
        """Parse a difficulty case-insensitively."""
        if not value:
            return None
        for level in cls:
            if level.value.lower() == str(value).strip().lower():
                return level
        return None
