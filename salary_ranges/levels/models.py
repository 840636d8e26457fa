from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Track of an internal level."""

    IC = "IC"
    MGR = "Mgr"

    @property
    def preferred_letter(self) -> str:
        """Survey token letter for this track (``P`` professional, ``M`` management)."""
        return "P" if self is Role.IC else "M"


@dataclass(frozen=True)
class LevelSpec:
    """A parsed internal level such as ``L6 IC`` or ``L6.5 Mgr``.

    Args:
        number: Level value, e.g. 6 or 6.5
        is_half: True for half levels, which sit between two whole levels
        role: IC or Mgr track
    """

    number: float
    is_half: bool
    role: Role

    def __post_init__(self):
        if self.number <= 0:
            raise ValueError(f"Level number must be positive, got {self.number}")
        if self.is_half != (self.number % 1 == 0.5):
            raise ValueError(f"Level {self.number} is inconsistent with is_half={self.is_half}")
        if not self.is_half and self.number % 1 != 0:
            raise ValueError(f"Level {self.number} must be whole or a half level")

    @property
    def floor(self) -> int:
        return int(self.number)

    @property
    def ceil(self) -> int:
        return self.floor + 1 if self.is_half else self.floor

    @property
    def name(self) -> str:
        """Canonical level string, the key used by the level table."""
        number = f"{self.floor}.5" if self.is_half else f"{self.floor}"
        return f"L{number} {self.role.value}"

    def floor_level(self) -> "LevelSpec":
        return LevelSpec(float(self.floor), False, self.role)

    def ceil_level(self) -> "LevelSpec":
        return LevelSpec(float(self.ceil), False, self.role)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BenchmarkToken:
    """Position of a row in a survey table, e.g. ``P5``, ``E3`` or ``EA``."""

    letter: str
    number: Optional[int] = None

    def __str__(self) -> str:
        return self.letter if self.number is None else f"{self.letter}{self.number}"
