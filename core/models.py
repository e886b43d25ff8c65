from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class TimeUnit(str, Enum):
    """Unit recognised in a relative timestamp, valued by its keyword."""

    MINUTES = "minute"
    HOURS = "hour"
    DAYS = "day"
    UNKNOWN = "unknown"

    @property
    def factor(self) -> int:
        return _UNIT_FACTORS[self]


# UNKNOWN keeps the raw integer unscaled
_UNIT_FACTORS: dict[TimeUnit, int] = {
    TimeUnit.MINUTES: 1,
    TimeUnit.HOURS: 60,
    TimeUnit.DAYS: 24 * 60,
    TimeUnit.UNKNOWN: 1,
}


@dataclass(frozen=True)
class ParsedTimestamp:
    raw: str
    value: int
    unit: TimeUnit

    @property
    def minutes(self) -> int:
        return self.value * self.unit.factor


@dataclass(frozen=True)
class Violation:
    """Two adjacent items where the later one is newer than the earlier."""

    previous: str
    current: str
    previous_minutes: int
    current_minutes: int
    position: int  # 1-based index of ``current`` within the run

    def describe(self) -> str:
        return f"{self.previous} is older than {self.current}"


@dataclass(frozen=True)
class ComparisonResult:
    is_ordered: bool
    current_minutes: int
    violation: Violation | None = None


class PaginationOutcome(str, Enum):
    ADVANCED = "advanced"
    NO_MORE_PAGES = "no_more_pages"
    RATE_LIMITED = "rate_limited"
    NAVIGATION_ERROR = "navigation_error"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    VIOLATION = "violation"
    RATE_LIMITED = "rate_limited"
    NO_MORE_PAGES = "no_more_pages"
    NAVIGATION_ERROR = "navigation_error"
    FAULT = "fault"

    @classmethod
    def from_outcome(cls, outcome: PaginationOutcome) -> RunStatus:
        return cls(outcome.value)


@dataclass(frozen=True)
class RunState:
    """Last accepted item of a run and how many items were accepted."""

    previous_timestamp: str | None = None
    previous_minutes: int | None = None
    processed_items: int = 0

    def accept(self, timestamp: str, minutes: int) -> RunState:
        return replace(
            self,
            previous_timestamp=timestamp,
            previous_minutes=minutes,
            processed_items=self.processed_items + 1,
        )


@dataclass
class CheckResult:
    """Outcome of a single checker run."""

    approach: str  # "batch", "streaming"
    is_ordered: bool
    processed_items: int
    items_to_check: int
    status: RunStatus
    duration_seconds: float
    violation: Violation | None = None
    error: str | None = None

    @property
    def partial(self) -> bool:
        return self.processed_items < self.items_to_check
