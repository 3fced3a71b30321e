# schedule_finder.py
# Enumerates conflict-free section combinations (one section per course) using a pruned backtracking DFS.

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from day_time import is_tba, parse_days, parse_time_range, to_minutes

__all__ = [
    "meeting_intervals",
    "intervals_overlap",
    "section_conflicts",
    "has_time_conflicts",
    "generate_schedule_combinations",
    "resolve_chosen_courses",
    "find_unresolvable_pairs",
]

logger = logging.getLogger(__name__)

Interval = Tuple[str, int, int]  # (day, start minute, end minute)
Section = Dict[str, Any]


def meeting_intervals(section: Section) -> List[Interval]:
    # Flatten a section's meetings into (day, start, end) triples, skipping TBA times.
    intervals: List[Interval] = []
    for meeting in section.get("schedule") or []:
        if not isinstance(meeting, dict) or is_tba(meeting.get("time")):
            continue
        start, end, _ = parse_time_range(meeting["time"])
        start_min, end_min = to_minutes(start), to_minutes(end)
        for day in parse_days(meeting.get("days")):
            intervals.append((day, start_min, end_min))
    return intervals


def intervals_overlap(a: Interval, b: Interval) -> bool:
    # Half-open: a class ending at 10:20 does not clash with one starting at 10:20.
    da, sa, ea = a
    db, sb, eb = b
    return da == db and sa < eb and ea > sb


def _any_overlap(intervals: List[Interval]) -> bool:
    for i in range(len(intervals)):
        for j in range(i + 1, len(intervals)):
            if intervals_overlap(intervals[i], intervals[j]):
                return True
    return False


def section_conflicts(a: Section, b: Section) -> bool:
    # Determines if two sections have any time overlap on any given day.
    for ia in meeting_intervals(a):
        for ib in meeting_intervals(b):
            if intervals_overlap(ia, ib):
                return True
    return False


def has_time_conflicts(sections: Sequence[Section]) -> bool:
    # True if any two meetings across the given sections overlap, including meetings of the same section.
    intervals: List[Interval] = []
    for section in sections:
        intervals.extend(meeting_intervals(section))
    return _any_overlap(intervals)


def generate_schedule_combinations(courses_sections: Sequence[Sequence[Section]]) -> List[List[Section]]:
    # Return every clash-free pick of one section per course, in DFS order.
    if not courses_sections:
        return []
    if len(courses_sections) == 1:
        return [[sec] for sec in courses_sections[0]]

    combinations: List[List[Section]] = []  # Final list of valid combinations.
    stack: List[Section] = []  # The current path (partial combination) in the DFS traversal.
    pruned = 0

    def dfs(i: int) -> None:
        nonlocal pruned
        if i == len(courses_sections):
            combinations.append(list(stack))
            return

        for sec in courses_sections[i]:
            # Prune this search branch if the new section clashes with the current path.
            if has_time_conflicts(stack + [sec]):
                pruned += 1
                continue
            stack.append(sec)
            dfs(i + 1)
            stack.pop()

    dfs(0)
    logger.debug(
        "combination search over %d courses: %d conflict-free, %d branches pruned",
        len(courses_sections), len(combinations), pruned,
    )
    return combinations


def resolve_chosen_courses(
    courses: Dict[str, List[Section]],
    chosen_info: List[Dict[str, Any]],
) -> List[Tuple[str, List[Section]]]:
    # Pick the requested sections for each chosen course; an absent "sections" list means all of them.
    per_course: List[Tuple[str, List[Section]]] = []

    for entry in chosen_info:
        name = entry.get("courseName")
        if name not in courses:
            logger.warning("ignoring unknown course %r", name)
            continue  # Ignore stale or misspelled course names from the request.

        wanted: Optional[set] = None
        if entry.get("sections") is not None:
            wanted = {str(s) for s in entry["sections"]}

        picked = [
            sec for sec in courses[name]
            if wanted is None or str(sec.get("id")) in wanted or str(sec.get("section")) in wanted
        ]
        per_course.append((name, picked))

    return per_course


def find_unresolvable_pairs(per_course: List[Tuple[str, List[Section]]]) -> List[List[str]]:
    # Identifies pairs of courses for which no non-conflicting section combination exists.
    bad_pairs: List[List[str]] = []

    for i in range(len(per_course)):
        for j in range(i + 1, len(per_course)):
            (name_a, secs_a), (name_b, secs_b) = per_course[i], per_course[j]
            # If every pairing of candidates for a and b clashes, the pair is unresolvable.
            if not any(
                not section_conflicts(sa, sb)
                for sa in secs_a
                for sb in secs_b
            ):
                bad_pairs.append([name_a, name_b])
    return bad_pairs
