# section_analysis.py
# Builds a section's day/time profile and scores it (0-100) against the active preferences.

import logging
from collections import defaultdict
from typing import Any, Dict, List, Tuple

from day_time import is_tba, parse_clock, parse_clock_range, parse_days, parse_time_range, to_minutes
from models import DayAnalysis, OptimizedSection, Preferences, ScheduleScore, TimeSlot

__all__ = [
    "analyze_section_days",
    "score_section",
    "optimize_section",
    "group_slots_by_day",
    "DEFAULT_MAX_GAP",
]

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAP = 60  # minutes, used when no max gap is configured

DAY_MATCH_PERFECT = 40
DAY_MATCH_GOOD = 25
DAY_MATCH_SINGLE = 10
TIME_FIT_POINTS = 5
TIME_FIT_CAP = 20
COMPACT_FEW_DAYS = 15
COMPACT_FOUR_DAYS = 8
COMPACT_SAME_DAY = 5
COMPACT_CAP = 20
SEATS_OPEN = 10
SEATS_WAITLIST = 5


def _meetings(section: Dict[str, Any]) -> List[Dict[str, Any]]:
    meetings = section.get("schedule") or []
    return [m for m in meetings if isinstance(m, dict)]


def _count(section: Dict[str, Any], key: str) -> int:
    value = section.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def analyze_section_days(section: Dict[str, Any], preferences: Preferences) -> DayAnalysis:
    # Collect the distinct meeting days and one TimeSlot per (meeting, day) pair.
    days: List[str] = []
    slots: List[TimeSlot] = []

    for meeting in _meetings(section):
        time_text = meeting.get("time")
        for day in parse_days(meeting.get("days")):
            if day not in days:
                days.append(day)
            if not is_tba(time_text):
                start, end, duration = parse_time_range(time_text)
                slots.append(TimeSlot(day, start, end, duration))

    preferred = sum(1 for d in days if d in preferences.preferred_days)
    non_preferred = len(days) - preferred

    return DayAnalysis(
        days_of_week=tuple(days),
        matches_preferred_days=non_preferred == 0 and preferred > 0,
        preferred_day_count=preferred,
        non_preferred_day_count=non_preferred,
        time_slots=tuple(slots),
    )


def group_slots_by_day(slots) -> Dict[str, List[TimeSlot]]:
    # Bucket slots per day, each bucket sorted by start time (stable for equal starts).
    grouped: Dict[str, List[TimeSlot]] = defaultdict(list)
    for slot in slots:
        grouped[slot.day].append(slot)
    for day_slots in grouped.values():
        day_slots.sort(key=lambda s: to_minutes(s.start_time))
    return dict(grouped)


def _day_match_points(analysis: DayAnalysis, reasons: List[str], warnings: List[str]) -> int:
    if analysis.matches_preferred_days:
        reasons.append(f"Perfect match: Only meets on {', '.join(analysis.days_of_week)}")
        return DAY_MATCH_PERFECT
    if analysis.preferred_day_count >= 2:
        reasons.append(f"Good match: {analysis.preferred_day_count} preferred days")
        if analysis.non_preferred_day_count > 0:
            warnings.append(f"Also meets on {analysis.non_preferred_day_count} non-preferred day(s)")
        return DAY_MATCH_GOOD
    if analysis.preferred_day_count == 1:
        warnings.append("Only meets on 1 preferred day")
        return DAY_MATCH_SINGLE
    warnings.append("Does not meet on any preferred days")
    return 0


def _time_fit_points(slots: Tuple[TimeSlot, ...], preferences: Preferences,
                     reasons: List[str], warnings: List[str]) -> int:
    prefs = preferences.time_preferences
    earliest = parse_clock(prefs.earliest_start) if prefs.earliest_start else None
    latest = parse_clock(prefs.latest_end) if prefs.latest_end else None
    avoided = [parse_clock_range(r) for r in prefs.avoid_time_slots]

    points = 0
    for slot in slots:
        start, end = to_minutes(slot.start_time), to_minutes(slot.end_time)

        if earliest is not None:
            if start >= earliest:
                points += TIME_FIT_POINTS
                reasons.append(f"Starts after {prefs.earliest_start}")
            else:
                warnings.append(f"Starts before preferred time ({slot.start_time})")

        if latest is not None:
            if end <= latest:
                points += TIME_FIT_POINTS
                reasons.append(f"Ends before {prefs.latest_end}")
            else:
                warnings.append(f"Ends after preferred time ({slot.end_time})")

        if avoided:
            if any(start < a_end and end > a_start for a_start, a_end in avoided):
                warnings.append("Conflicts with avoided time slot")
            else:
                points += TIME_FIT_POINTS

    return min(TIME_FIT_CAP, points)


def _has_minimal_gaps(day_slots: List[TimeSlot], max_gap: int) -> bool:
    for current, nxt in zip(day_slots, day_slots[1:]):
        if to_minutes(nxt.start_time) - to_minutes(current.end_time) > max_gap:
            return False
    return True


def _compact_points(analysis: DayAnalysis, preferences: Preferences, reasons: List[str]) -> int:
    points = 0
    day_count = len(analysis.days_of_week)
    if day_count <= 3:
        points += COMPACT_FEW_DAYS
        reasons.append(f"Compact: Only {day_count} days per week")
    elif day_count == 4:
        points += COMPACT_FOUR_DAYS
        reasons.append(f"Moderate: {day_count} days per week")

    max_gap = preferences.max_gap if preferences.max_gap is not None else DEFAULT_MAX_GAP
    for day_slots in group_slots_by_day(analysis.time_slots).values():
        if len(day_slots) > 1 and _has_minimal_gaps(day_slots, max_gap):
            points += COMPACT_SAME_DAY
            reasons.append("Consecutive classes on same day")

    return min(COMPACT_CAP, points)


def score_section(section: Dict[str, Any], analysis: DayAnalysis, preferences: Preferences) -> ScheduleScore:
    # Rules run in a fixed order and append reasons/warnings as they fire:
    # day match (0-40), time fit (0-20), compactness (0-20), availability (0-10).
    reasons: List[str] = []
    warnings: List[str] = []

    score = _day_match_points(analysis, reasons, warnings)

    if preferences.time_preferences is not None:
        score += _time_fit_points(analysis.time_slots, preferences, reasons, warnings)

    if preferences.prioritize_compact_schedule:
        score += _compact_points(analysis, preferences, reasons)

    seats = _count(section, "seats")
    waitlist = _count(section, "waitlist")
    waitlisted = False
    if seats > 0:
        score += SEATS_OPEN
        reasons.append(f"{seats} seats available")
    elif waitlist > 0:
        score += SEATS_WAITLIST
        waitlisted = True
        warnings.append(f"Waitlisted ({waitlist} on waitlist)")
    else:
        warnings.append("No seats available")

    return ScheduleScore(
        score=min(100, max(0, score)),
        reasons=tuple(reasons),
        warnings=tuple(warnings),
        waitlisted=waitlisted,
    )


def optimize_section(section: Dict[str, Any], preferences: Preferences) -> OptimizedSection:
    analysis = analyze_section_days(section, preferences)
    score = score_section(section, analysis, preferences)
    logger.debug("scored section %s: %s", section.get("id", section.get("section")), score.score)
    return OptimizedSection(section=section, day_analysis=analysis, schedule_score=score)
