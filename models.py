# models.py
# Value types shared by the scheduling engine: preferences, parsed slots, scores and combinations.

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from day_time import DAY_SYMBOLS, parse_clock, parse_clock_range

__all__ = [
    "TimePreferences",
    "GapPreferences",
    "Preferences",
    "TimeSlot",
    "DayAnalysis",
    "ScheduleScore",
    "OptimizedSection",
    "ScheduleAnalysis",
    "RecommendationKind",
    "Recommendation",
    "DayRecommendation",
    "GapRecommendation",
    "LoadRecommendation",
    "WaitlistRecommendation",
    "ScheduleCombination",
]


@dataclass(frozen=True)
class TimePreferences:
    earliest_start: Optional[str] = None  # "HH:MM"
    latest_end: Optional[str] = None  # "HH:MM"
    avoid_time_slots: Tuple[str, ...] = ()  # e.g. ("12:00-13:00",)

    def __post_init__(self):
        for clock in (self.earliest_start, self.latest_end):
            if clock is not None:
                parse_clock(clock)
        if not isinstance(self.avoid_time_slots, (list, tuple)):
            raise ValueError("avoid_time_slots must be a list of \"HH:MM-HH:MM\" ranges")
        # Accept lists from callers but keep the stored value hashable.
        object.__setattr__(self, "avoid_time_slots", tuple(self.avoid_time_slots))
        for rng in self.avoid_time_slots:
            parse_clock_range(rng)


@dataclass(frozen=True)
class GapPreferences:
    max_gap_between_classes: Optional[int] = None  # minutes
    min_gap_between_classes: Optional[int] = None  # minutes

    def __post_init__(self):
        for gap in (self.max_gap_between_classes, self.min_gap_between_classes):
            if gap is not None and gap < 0:
                raise ValueError(f"gap must be non-negative, got {gap}")


@dataclass(frozen=True)
class Preferences:
    # Everything the scorer needs for one query. Unset optional groups switch
    # their scoring stage off: no time_preferences means no time-fit points,
    # and compactness is only scored when prioritize_compact_schedule is true.

    preferred_days: Tuple[str, ...] = ("M", "T", "R")
    time_preferences: Optional[TimePreferences] = None
    gap_preferences: Optional[GapPreferences] = None
    prioritize_compact_schedule: bool = False

    def __post_init__(self):
        if not isinstance(self.preferred_days, (list, tuple)):
            raise ValueError("preferred_days must be a list of day symbols")
        days = tuple(self.preferred_days)
        unknown = [d for d in days if not isinstance(d, str) or d not in DAY_SYMBOLS]
        if unknown:
            raise ValueError(f"unknown day symbol(s): {', '.join(map(repr, unknown))}")
        object.__setattr__(self, "preferred_days", days)

    @property
    def max_gap(self) -> Optional[int]:
        return self.gap_preferences.max_gap_between_classes if self.gap_preferences else None

    @property
    def min_gap(self) -> Optional[int]:
        return self.gap_preferences.min_gap_between_classes if self.gap_preferences else None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Preferences":
        # Build preferences from a flat JSON payload; unknown keys are ignored.
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("preferences must be an object")

        time_prefs = None
        if any(k in data for k in ("earliestStart", "latestEnd", "avoidTimeSlots")):
            time_prefs = TimePreferences(
                earliest_start=data.get("earliestStart"),
                latest_end=data.get("latestEnd"),
                avoid_time_slots=data.get("avoidTimeSlots") or (),
            )

        gap_prefs = None
        if any(k in data for k in ("maxGap", "minGap")):
            gap_prefs = GapPreferences(
                max_gap_between_classes=_optional_int(data.get("maxGap"), "maxGap"),
                min_gap_between_classes=_optional_int(data.get("minGap"), "minGap"),
            )

        # Only a missing key falls back to Mon/Tue/Thu; an explicit [] means no preferred days.
        days = data.get("preferredDays")
        if days is None:
            days = ("M", "T", "R")
        elif not isinstance(days, (list, tuple)):
            raise ValueError("preferredDays must be a list of day symbols")

        return cls(
            preferred_days=days,
            time_preferences=time_prefs,
            gap_preferences=gap_prefs,
            prioritize_compact_schedule=bool(data.get("prioritizeCompact", False)),
        )


def _optional_int(value: Any, name: str) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer number of minutes")
    return value


@dataclass(frozen=True)
class TimeSlot:
    day: str
    start_time: str  # "HH:MM", 24-hour
    end_time: str
    duration: int  # minutes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }


@dataclass(frozen=True)
class DayAnalysis:
    days_of_week: Tuple[str, ...]
    matches_preferred_days: bool
    preferred_day_count: int
    non_preferred_day_count: int
    time_slots: Tuple[TimeSlot, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daysOfWeek": list(self.days_of_week),
            "matchesPreferredDays": self.matches_preferred_days,
            "preferredDayCount": self.preferred_day_count,
            "nonPreferredDayCount": self.non_preferred_day_count,
            "timeSlots": [s.to_dict() for s in self.time_slots],
        }


@dataclass(frozen=True)
class ScheduleScore:
    score: float  # clamped to [0, 100]
    reasons: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()
    waitlisted: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "reasons": list(self.reasons),
            "warnings": list(self.warnings),
            "waitlisted": self.waitlisted,
        }


@dataclass(frozen=True)
class OptimizedSection:
    # The catalog record is kept as-is; it is only read, never mutated.
    section: Dict[str, Any] = field(hash=False, compare=False)
    day_analysis: DayAnalysis
    schedule_score: ScheduleScore

    @property
    def score(self) -> float:
        return self.schedule_score.score

    def to_dict(self) -> Dict[str, Any]:
        return dict(
            self.section,
            dayAnalysis=self.day_analysis.to_dict(),
            scheduleScore=self.schedule_score.to_dict(),
        )


@dataclass(frozen=True)
class ScheduleAnalysis:
    days_used: Tuple[str, ...]
    total_hours_per_week: float
    longest_day: float  # hours
    shortest_day: float  # hours
    average_gap_time: float  # minutes
    has_conflicts: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daysUsed": list(self.days_used),
            "totalHoursPerWeek": self.total_hours_per_week,
            "longestDay": self.longest_day,
            "shortestDay": self.shortest_day,
            "averageGapTime": self.average_gap_time,
            "hasConflicts": self.has_conflicts,
        }


class RecommendationKind(Enum):
    NON_PREFERRED_DAYS = "non_preferred_days"
    TOO_MANY_DAYS = "too_many_days"
    LONG_GAPS = "long_gaps"
    SHORT_GAPS = "short_gaps"
    LONG_DAY = "long_day"
    WAITLISTED = "waitlisted"


@dataclass(frozen=True)
class Recommendation:
    kind: RecommendationKind
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class DayRecommendation(Recommendation):
    days: Tuple[str, ...] = ()


@dataclass(frozen=True)
class GapRecommendation(Recommendation):
    minutes: float = 0


@dataclass(frozen=True)
class LoadRecommendation(Recommendation):
    hours: float = 0


@dataclass(frozen=True)
class WaitlistRecommendation(Recommendation):
    section_count: int = 0


@dataclass(frozen=True)
class ScheduleCombination:
    sections: Tuple[OptimizedSection, ...]
    total_score: float
    schedule_analysis: ScheduleAnalysis
    recommendations: Tuple[Recommendation, ...] = ()

    @property
    def recommendation_messages(self) -> List[str]:
        return [r.message for r in self.recommendations]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "totalScore": self.total_score,
            "scheduleAnalysis": self.schedule_analysis.to_dict(),
            "recommendations": self.recommendation_messages,
            "recommendationDetails": [r.to_dict() for r in self.recommendations],
        }
