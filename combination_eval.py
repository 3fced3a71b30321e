# combination_eval.py
# Scores a conflict-free combination as a whole week and suggests how it could be improved.

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Sequence

from day_time import to_minutes
from models import (
    DayRecommendation,
    GapRecommendation,
    LoadRecommendation,
    OptimizedSection,
    Preferences,
    Recommendation,
    RecommendationKind,
    ScheduleAnalysis,
    ScheduleCombination,
    TimeSlot,
    WaitlistRecommendation,
)
from schedule_finder import has_time_conflicts
from section_analysis import group_slots_by_day, optimize_section

__all__ = [
    "analyze_complete_schedule",
    "average_gap_minutes",
    "combination_score",
    "generate_recommendations",
    "evaluate_combination",
]

logger = logging.getLogger(__name__)

PREFERRED_DAY_BONUS = 5
FEW_DAYS_BONUS = 15
NO_CONFLICT_BONUS = 10

MAX_COMFORTABLE_DAYS = 3
LONG_GAP_MINUTES = 90
LONG_DAY_HOURS = 8


def _consecutive_gaps(slots: Iterable[TimeSlot]) -> List[int]:
    gaps: List[int] = []
    for day_slots in group_slots_by_day(slots).values():
        for current, nxt in zip(day_slots, day_slots[1:]):
            gaps.append(to_minutes(nxt.start_time) - to_minutes(current.end_time))
    return gaps


def average_gap_minutes(slots: Iterable[TimeSlot]) -> float:
    # Mean of the positive same-day gaps; 0 when there are none.
    positive = [g for g in _consecutive_gaps(slots) if g > 0]
    return sum(positive) / len(positive) if positive else 0


def _all_slots(sections: Sequence[OptimizedSection]) -> List[TimeSlot]:
    return [slot for s in sections for slot in s.day_analysis.time_slots]


def analyze_complete_schedule(sections: Sequence[OptimizedSection]) -> ScheduleAnalysis:
    days_used: List[str] = []
    daily_hours: Dict[str, float] = defaultdict(float)
    total_hours = 0.0

    for section in sections:
        for day in section.day_analysis.days_of_week:
            if day not in days_used:
                days_used.append(day)
        for slot in section.day_analysis.time_slots:
            total_hours += slot.duration / 60
            daily_hours[slot.day] += slot.duration / 60

    hours = list(daily_hours.values())

    return ScheduleAnalysis(
        days_used=tuple(days_used),
        total_hours_per_week=total_hours,
        longest_day=max(hours) if hours else 0,
        shortest_day=min(hours) if hours else 0,
        average_gap_time=average_gap_minutes(_all_slots(sections)),
        has_conflicts=has_time_conflicts([s.section for s in sections]),
    )


def combination_score(sections: Sequence[OptimizedSection], analysis: ScheduleAnalysis,
                      preferences: Preferences) -> float:
    avg = sum(s.score for s in sections) / len(sections) if sections else 0

    bonus = PREFERRED_DAY_BONUS * sum(1 for d in analysis.days_used if d in preferences.preferred_days)
    if len(analysis.days_used) <= MAX_COMFORTABLE_DAYS:
        bonus += FEW_DAYS_BONUS
    if not analysis.has_conflicts:
        bonus += NO_CONFLICT_BONUS

    return min(100, max(0, avg + bonus))


def generate_recommendations(sections: Sequence[OptimizedSection], analysis: ScheduleAnalysis,
                             preferences: Preferences) -> List[Recommendation]:
    # Each improvement rule runs independently; the ones that fire are returned in rule order.
    recommendations: List[Recommendation] = []

    non_preferred = tuple(d for d in analysis.days_used if d not in preferences.preferred_days)
    if non_preferred:
        recommendations.append(DayRecommendation(
            kind=RecommendationKind.NON_PREFERRED_DAYS,
            message=f"Consider finding alternatives to avoid classes on {', '.join(non_preferred)}",
            days=non_preferred,
        ))

    if len(analysis.days_used) > MAX_COMFORTABLE_DAYS:
        recommendations.append(DayRecommendation(
            kind=RecommendationKind.TOO_MANY_DAYS,
            message="Look for sections that meet fewer days per week",
            days=analysis.days_used,
        ))

    if analysis.average_gap_time > LONG_GAP_MINUTES:
        recommendations.append(GapRecommendation(
            kind=RecommendationKind.LONG_GAPS,
            message="Consider sections with shorter gaps between classes",
            minutes=analysis.average_gap_time,
        ))

    min_gap = preferences.min_gap
    if min_gap:
        tight = [g for g in _consecutive_gaps(_all_slots(sections)) if 0 <= g < min_gap]
        if tight:
            recommendations.append(GapRecommendation(
                kind=RecommendationKind.SHORT_GAPS,
                message=f"Some classes leave less than {min_gap} minutes to get to the next one",
                minutes=min(tight),
            ))

    if analysis.longest_day > LONG_DAY_HOURS:
        recommendations.append(LoadRecommendation(
            kind=RecommendationKind.LONG_DAY,
            message="Your longest day has over 8 hours - consider redistributing classes",
            hours=analysis.longest_day,
        ))

    waitlisted = sum(1 for s in sections if s.schedule_score.waitlisted)
    if waitlisted:
        recommendations.append(WaitlistRecommendation(
            kind=RecommendationKind.WAITLISTED,
            message=f"{waitlisted} section(s) require waitlisting - have backup options ready",
            section_count=waitlisted,
        ))

    return recommendations


def evaluate_combination(sections: Sequence[Dict[str, Any]], preferences: Preferences) -> ScheduleCombination:
    # Members keep the course order they were picked in.
    optimized = [optimize_section(sec, preferences) for sec in sections]
    analysis = analyze_complete_schedule(optimized)
    if analysis.has_conflicts:
        logger.warning("combination of %d sections has a time conflict", len(sections))

    return ScheduleCombination(
        sections=tuple(optimized),
        total_score=combination_score(optimized, analysis, preferences),
        schedule_analysis=analysis,
        recommendations=tuple(generate_recommendations(optimized, analysis, preferences)),
    )
