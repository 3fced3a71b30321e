import pytest


def section(meetings, seats=10, waitlist=0, id=None, name="001"):
    # meetings: list of (days, time) pairs
    return {
        "id": id,
        "subject": "CSC",
        "course_code": "110",
        "section": name,
        "schedule": [{"days": d, "time": t, "instructor": "TBA"} for d, t in meetings],
        "seats": seats,
        "waitlist": waitlist,
    }


@pytest.fixture
def make_section():
    return section
