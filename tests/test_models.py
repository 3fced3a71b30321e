import pytest

from models import GapPreferences, Preferences, TimePreferences


def test_from_dict_builds_every_group():
    prefs = Preferences.from_dict({
        "preferredDays": ["M", "W"],
        "earliestStart": "09:00",
        "latestEnd": "17:00",
        "avoidTimeSlots": ["12:00-13:00"],
        "maxGap": 45,
        "minGap": 5,
        "prioritizeCompact": True,
    })
    assert prefs == Preferences(
        preferred_days=("M", "W"),
        time_preferences=TimePreferences("09:00", "17:00", ("12:00-13:00",)),
        gap_preferences=GapPreferences(45, 5),
        prioritize_compact_schedule=True,
    )


def test_from_dict_leaves_unset_groups_off():
    prefs = Preferences.from_dict({"preferredDays": ["T", "R"]})
    assert prefs.time_preferences is None
    assert prefs.gap_preferences is None
    assert prefs.max_gap is None
    assert Preferences.from_dict(None) == Preferences()


@pytest.mark.parametrize("payload", [
    {"preferredDays": ["X"]},
    {"earliestStart": "early"},
    {"avoidTimeSlots": ["noon"]},
    {"maxGap": -5},
    {"minGap": "ten"},
    {"preferredDays": [1]},
    {"preferredDays": "MTR"},
    {"avoidTimeSlots": 5},
    ["M"],
])
def test_from_dict_rejects_bad_configuration(payload):
    with pytest.raises(ValueError):
        Preferences.from_dict(payload)


def test_avoid_slots_are_stored_as_tuple():
    prefs = TimePreferences(avoid_time_slots=["12:00-13:00"])
    assert prefs.avoid_time_slots == ("12:00-13:00",)
    hash(prefs)


def test_explicit_empty_preferred_days_is_kept():
    assert Preferences.from_dict({"preferredDays": []}).preferred_days == ()
    assert Preferences.from_dict({}).preferred_days == ("M", "T", "R")
