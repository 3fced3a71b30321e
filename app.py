# app.py
# Provides a minimal Flask-based REST API over the smart scheduler for the planner frontend.

from flask import Flask, request, jsonify
import os, json
import logging
from typing import Any, Dict, List

from models import Preferences
from schedule_finder import resolve_chosen_courses, find_unresolvable_pairs
from smart_scheduler import SmartScheduler, MTR_PREFERENCES, DEFAULT_MAX_COMBINATIONS

app = Flask(__name__)
logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
COURSES_FILE = os.environ.get("SCHEDULE_COURSES_FILE", os.path.join(BASE_DIR, "courses.json"))
MAX_COMBINATIONS = int(os.environ.get("SCHEDULE_MAX_COMBINATIONS", DEFAULT_MAX_COMBINATIONS))
DEBUG = os.environ.get("SCHEDULE_DEBUG", "").lower() in {"1", "true", "yes"}

ALL_COURSES: Dict[str, List[Dict[str, Any]]] = {}  # Global cache for the course catalog, loaded at startup.


@app.get("/api/courses")
def api_courses():
    # Returns the catalog sections grouped by "<subject>-<course_code>".
    return jsonify(ALL_COURSES)


@app.post("/api/sections/analyze")
def api_analyze_sections():
    # Scores the sections of one course (or an inline list) against the request preferences.
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    try:
        scheduler = scheduler_for(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if "sections" in body:
        sections = body["sections"]
        if not isinstance(sections, list) or not all(isinstance(s, dict) for s in sections):
            return jsonify({"error": "sections must be a list of objects"}), 400
    elif isinstance(body.get("courseName"), str) and body["courseName"] in ALL_COURSES:
        sections = ALL_COURSES[body["courseName"]]
    else:
        return jsonify({"error": "either sections or a known courseName is required"}), 400

    if body.get("preferredOnly"):
        analyzed = scheduler.filter_preferred_day_sections(sections)
    else:
        analyzed = scheduler.analyze_sections(sections)
    return jsonify([s.to_dict() for s in analyzed])


@app.post("/api/schedules")
def api_schedules():
    # Ranks conflict-free combinations from a JSON payload of chosen courses and sections.
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    chosen = body.get("chosenCourses", [])
    if not (isinstance(chosen, list) and chosen and all(isinstance(c, dict) for c in chosen)):
        return jsonify({"error": "chosenCourses must be a non-empty list"}), 400
    for entry in chosen:
        if not isinstance(entry.get("courseName"), str):
            return jsonify({"error": "each chosen course needs a courseName string"}), 400
        if entry.get("sections") is not None and not isinstance(entry["sections"], list):
            return jsonify({"error": "sections must be a list of section ids"}), 400

    limit = body.get("maxCombinations", MAX_COMBINATIONS)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        return jsonify({"error": "maxCombinations must be a positive integer"}), 400

    try:
        scheduler = scheduler_for(body)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    per_course = resolve_chosen_courses(ALL_COURSES, chosen)
    combinations = scheduler.find_optimal_combinations([secs for _, secs in per_course], limit)
    if combinations:
        return jsonify([c.to_dict() for c in combinations])

    # If no schedules are possible, identify pairs of courses that are inherently in conflict.
    return jsonify({
        "error": "No valid schedules found",
        "unresolvablePairs": find_unresolvable_pairs(per_course),
    })


def scheduler_for(body: Dict[str, Any]) -> SmartScheduler:
    # No preferences in the request means the Mon/Tue/Thu preset.
    if body.get("preferences") is None:
        return SmartScheduler(MTR_PREFERENCES)
    return SmartScheduler(Preferences.from_dict(body["preferences"]))


def load_courses(path: str = COURSES_FILE) -> Dict[str, List[Dict[str, Any]]]:
    # Loads and validates catalog sections from a JSON file, grouping them per course.
    with open(path, encoding="utf-8") as f:
        sections = json.load(f)

    if not isinstance(sections, list):
        raise ValueError("catalog must be a list of sections")

    courses: Dict[str, List[Dict[str, Any]]] = {}
    for s in sections:
        if not isinstance(s, dict):                                raise ValueError(s)
        if not s.get("subject") or not s.get("course_code"):       raise ValueError(s)
        if not isinstance(s.get("schedule", []), list):            raise ValueError(s)
        if not isinstance(s.get("seats", 0), int):                 raise ValueError(s)
        if not isinstance(s.get("waitlist", 0), int):              raise ValueError(s)

        courses.setdefault(f"{s['subject']}-{s['course_code']}", []).append(s)

    logger.info("loaded %d sections across %d courses from %s", len(sections), len(courses), path)
    return courses


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # Keep werkzeug's per-request access lines out of the log.
    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    # Load course data into memory and start the development server.
    ALL_COURSES = load_courses()
    app.run(debug=DEBUG)
