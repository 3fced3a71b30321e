# smart_scheduler.py
# Entry point for callers: scores sections, filters them by preferred days, and ranks full-week combinations.

import dataclasses
import logging
from typing import Any, Dict, List, Optional, Sequence

from combination_eval import evaluate_combination
from models import GapPreferences, OptimizedSection, Preferences, ScheduleCombination, TimePreferences
from schedule_finder import generate_schedule_combinations
from section_analysis import optimize_section

__all__ = ["SmartScheduler", "MTR_PREFERENCES", "create_mtr_scheduler"]

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS = 10

# Monday/Tuesday/Thursday preset with a lunch break kept free.
MTR_PREFERENCES = Preferences(
    preferred_days=("M", "T", "R"),
    time_preferences=TimePreferences(
        earliest_start="08:00",
        latest_end="18:00",
        avoid_time_slots=("12:00-13:00",),
    ),
    gap_preferences=GapPreferences(
        max_gap_between_classes=90,
        min_gap_between_classes=10,
    ),
    prioritize_compact_schedule=True,
)


class SmartScheduler:
    # Holds one read-only set of preferences; build a new scheduler to change them.

    def __init__(self, preferences: Optional[Preferences] = None):
        self._preferences = preferences if preferences is not None else Preferences()

    @property
    def preferences(self) -> Preferences:
        return self._preferences

    def analyze_sections(self, sections: Sequence[Dict[str, Any]]) -> List[OptimizedSection]:
        # Highest score first; sorted() is stable, so ties keep input order.
        optimized = [optimize_section(sec, self._preferences) for sec in sections]
        return sorted(optimized, key=lambda s: s.score, reverse=True)

    def filter_preferred_day_sections(self, sections: Sequence[Dict[str, Any]]) -> List[OptimizedSection]:
        kept = []
        for sec in self.analyze_sections(sections):
            a = sec.day_analysis
            if (a.matches_preferred_days
                    or a.non_preferred_day_count == 0
                    or (a.preferred_day_count >= 2 and a.non_preferred_day_count <= 1)):
                kept.append(sec)
        return kept

    def find_optimal_combinations(
        self,
        courses_sections: Sequence[Sequence[Dict[str, Any]]],
        max_combinations: int = DEFAULT_MAX_COMBINATIONS,
    ) -> List[ScheduleCombination]:
        combos = generate_schedule_combinations(courses_sections)
        scored = [evaluate_combination(c, self._preferences) for c in combos]
        scored.sort(key=lambda c: c.total_score, reverse=True)
        logger.info(
            "ranked %d conflict-free combinations across %d courses",
            len(scored), len(courses_sections),
        )
        return scored[:max(0, max_combinations)]


def create_mtr_scheduler(**overrides) -> SmartScheduler:
    # Start from the Mon/Tue/Thu preset; each keyword replaces a whole Preferences field.
    return SmartScheduler(dataclasses.replace(MTR_PREFERENCES, **overrides))
