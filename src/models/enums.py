"""Enums for model fields."""

from enum import StrEnum


class TideType(StrEnum):
    """Kind of tide turning point reported by NOAA."""

    HIGH = "High"
    LOW = "Low"

    @classmethod
    def from_noaa(cls, code: str | None) -> "TideType | None":
        """Map a NOAA hilo code ("H", "HH", "L", "LL") to a tide type."""
        if not code:
            return None
        code = code.strip().upper()
        if code.startswith("H"):
            return cls.HIGH
        if code.startswith("L"):
            return cls.LOW
        return None
