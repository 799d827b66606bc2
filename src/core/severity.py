"""Severity levels shared by every adapter and decision function."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Tuple


class SeverityLevel(str, Enum):
    """심각도 등급(Severity level), highest first."""

    CRITICAL = "critical"
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"
    INFO = "info"

    @property
    def score(self) -> int:
        return SEVERITY_SCORE[self]

    @classmethod
    def parse(cls, value: Any) -> Optional["SeverityLevel"]:
        """Return the level for an exact recognized value, else None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


SEVERITY_ORDER: Tuple[SeverityLevel, ...] = (
    SeverityLevel.CRITICAL,
    SeverityLevel.HIGH,
    SeverityLevel.MODERATE,
    SeverityLevel.LOW,
    SeverityLevel.INFO,
)

SEVERITY_SCORE: Dict[SeverityLevel, int] = {
    SeverityLevel.CRITICAL: 100,
    SeverityLevel.HIGH: 80,
    SeverityLevel.MODERATE: 50,
    SeverityLevel.LOW: 20,
    SeverityLevel.INFO: 5,
}


def empty_counts() -> Dict[SeverityLevel, int]:
    """심각도별 0 카운트(Zero count per level, in display order)."""

    return {level: 0 for level in SEVERITY_ORDER}
