from models import GapPreferences, Preferences, TimePreferences
from section_analysis import analyze_section_days, optimize_section, score_section
from smart_scheduler import MTR_PREFERENCES

DEFAULT = Preferences()


def test_day_analysis_counts(make_section):
    a = analyze_section_days(make_section([("MWF", "09:00-09:50")]), DEFAULT)
    assert a.days_of_week == ("M", "W", "F")
    assert a.preferred_day_count == 1
    assert a.non_preferred_day_count == 2
    assert not a.matches_preferred_days
    assert [s.day for s in a.time_slots] == ["M", "W", "F"]
    assert all(s.duration == 50 for s in a.time_slots)


def test_day_analysis_unions_meetings(make_section):
    sec = make_section([("M", "2:00PM-3:50PM"), ("R", "2:00PM-3:50PM")])
    a = analyze_section_days(sec, DEFAULT)
    assert a.days_of_week == ("M", "R")
    assert a.matches_preferred_days
    assert [(s.day, s.start_time, s.end_time) for s in a.time_slots] == [
        ("M", "14:00", "15:50"), ("R", "14:00", "15:50"),
    ]


def test_tba_meeting_has_days_but_no_slots(make_section):
    a = analyze_section_days(make_section([("TR", "TBA")]), DEFAULT)
    assert a.days_of_week == ("T", "R")
    assert a.time_slots == ()


def test_unparsable_time_becomes_midnight_slot(make_section):
    a = analyze_section_days(make_section([("M", "by arrangement")]), DEFAULT)
    assert [(s.start_time, s.end_time, s.duration) for s in a.time_slots] == [("00:00", "00:00", 0)]


def test_counts_always_add_up(make_section):
    for days in ["MWF", "TR", "MTWRF", "TBA", "F", "Tu Th"]:
        a = analyze_section_days(make_section([(days, "10:00-10:50")]), DEFAULT)
        assert a.preferred_day_count + a.non_preferred_day_count == len(a.days_of_week)


def test_default_preferences_skip_time_and_compact(make_section):
    sec = make_section([("MWF", "09:00-09:50")], seats=5)
    score = optimize_section(sec, DEFAULT).schedule_score
    assert score.score == 20
    assert score.reasons == ("5 seats available",)
    assert score.warnings == ("Only meets on 1 preferred day",)


def test_waitlisted_section(make_section):
    sec = make_section([("TR", "10:00-11:20")], seats=0, waitlist=3)
    score = optimize_section(sec, DEFAULT).schedule_score
    assert score.score == 45
    assert score.waitlisted
    assert score.reasons == ("Perfect match: Only meets on T, R",)
    assert score.warnings == ("Waitlisted (3 on waitlist)",)


def test_good_match_warns_about_extra_days(make_section):
    sec = make_section([("M", "09:00-09:50"), ("TR", "09:00-09:50"), ("F", "09:00-09:50")])
    score = optimize_section(sec, DEFAULT).schedule_score
    assert score.reasons[0] == "Good match: 3 preferred days"
    assert score.warnings[0] == "Also meets on 1 non-preferred day(s)"
    assert score.score == 35


def test_full_mtr_scoring_order(make_section):
    sec = make_section([("TR", "10:00-11:20")], seats=5)
    score = optimize_section(sec, MTR_PREFERENCES).schedule_score
    # 40 day match + 20 (capped) time fit + 15 compact + 10 seats
    assert score.score == 85
    assert score.reasons == (
        "Perfect match: Only meets on T, R",
        "Starts after 08:00",
        "Ends before 18:00",
        "Starts after 08:00",
        "Ends before 18:00",
        "Compact: Only 2 days per week",
        "5 seats available",
    )
    assert score.warnings == ()


def test_time_fit_warnings(make_section):
    early = make_section([("M", "7:00-8:15")])
    score = optimize_section(early, MTR_PREFERENCES).schedule_score
    assert "Starts before preferred time (07:00)" in score.warnings

    late = make_section([("M", "5:00PM-6:15PM")])
    score = optimize_section(late, MTR_PREFERENCES).schedule_score
    assert "Ends after preferred time (18:15)" in score.warnings

    lunch = make_section([("M", "11:30-12:30")])
    score = optimize_section(lunch, MTR_PREFERENCES).schedule_score
    assert score.warnings == ("Conflicts with avoided time slot",)
    assert score.score == 40 + 10 + 15 + 10


def test_avoided_range_touching_slot_is_fine(make_section):
    sec = make_section([("M", "13:00-13:50")])
    score = optimize_section(sec, MTR_PREFERENCES).schedule_score
    assert "Conflicts with avoided time slot" not in score.warnings


def test_only_configured_time_checks_run(make_section):
    prefs = Preferences(time_preferences=TimePreferences(latest_end="12:00"))
    sec = make_section([("M", "7:00-7:50")], seats=0)
    score = optimize_section(sec, prefs).schedule_score
    assert score.reasons == ("Perfect match: Only meets on M", "Ends before 12:00")
    assert score.score == 45


def test_compact_same_day_bonus(make_section):
    sec = make_section([("M", "09:00-09:50"), ("M", "10:00-10:50")])
    score = optimize_section(sec, MTR_PREFERENCES).schedule_score
    assert "Consecutive classes on same day" in score.reasons


def test_compact_gap_uses_default_when_unset(make_section):
    sec = make_section([("M", "09:00-09:50"), ("M", "11:00-11:50")])

    compact = Preferences(prioritize_compact_schedule=True)
    assert "Consecutive classes on same day" not in optimize_section(sec, compact).schedule_score.reasons

    relaxed = Preferences(
        prioritize_compact_schedule=True,
        gap_preferences=GapPreferences(max_gap_between_classes=90),
    )
    assert "Consecutive classes on same day" in optimize_section(sec, relaxed).schedule_score.reasons


def test_compact_four_and_five_days(make_section):
    prefs = Preferences(prioritize_compact_schedule=True)
    four = optimize_section(make_section([("MTWR", "TBA")]), prefs).schedule_score
    assert "Moderate: 4 days per week" in four.reasons
    five = optimize_section(make_section([("MTWRF", "TBA")]), prefs).schedule_score
    assert not any(r.startswith(("Compact", "Moderate")) for r in five.reasons)


def test_nothing_available(make_section):
    sec = make_section([("TBA", "TBA")], seats=0, waitlist=0)
    score = optimize_section(sec, DEFAULT).schedule_score
    assert score.score == 0
    assert score.warnings == ("Does not meet on any preferred days", "No seats available")


def test_missing_fields_do_not_raise():
    opt = optimize_section({"id": 7}, MTR_PREFERENCES)
    assert opt.day_analysis.days_of_week == ()
    assert 0 <= opt.score <= 100


def test_scores_stay_in_range(make_section):
    cases = [
        make_section([("M", "09:00-09:50"), ("M", "10:00-10:50"), ("R", "10:00-10:50")], seats=99),
        make_section([("MTWRF", "7:00AM-11:00PM")], seats=0),
        make_section([("Sat", "TBA")], seats=-4, waitlist=-1),
    ]
    for sec in cases:
        for prefs in (DEFAULT, MTR_PREFERENCES):
            analysis = analyze_section_days(sec, prefs)
            assert 0 <= score_section(sec, analysis, prefs).score <= 100


def test_compactness_stage_is_capped(make_section):
    sec = make_section([
        ("M", "09:00-09:50"), ("M", "10:00-10:50"),
        ("T", "09:00-09:50"), ("T", "10:00-10:50"),
    ])
    score = optimize_section(sec, Preferences(prioritize_compact_schedule=True)).schedule_score
    # 15 for two days plus 5 per qualifying day would be 25; the stage stops at 20.
    assert score.score == 40 + 20 + 10
    assert score.reasons == (
        "Perfect match: Only meets on M, T",
        "Compact: Only 2 days per week",
        "Consecutive classes on same day",
        "Consecutive classes on same day",
        "10 seats available",
    )
