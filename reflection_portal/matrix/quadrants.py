"""Quadrant registry and classifier for the payoff matrix.

Importance runs along x, satisfaction along y. A value exactly on the
midpoint belongs to the high side of that axis.
"""

Q1 = {
    "code": "Q1",
    "label": "Prioritize",
    "description": "High importance and high satisfaction. Keep it and consider expanding it school-wide.",
    "point_color": "#16a34a",
    "background": "#f0fdf4",
    "watermark_color": "#166534",
    "badge": "rp-quadrant--q1",
}

Q2 = {
    "code": "Q2",
    "label": "Keep selectively / scale down",
    "description": "Satisfying but comparatively less important. Keep it, adjusting audience, size or frequency.",
    "point_color": "#ca8a04",
    "background": "#fefce8",
    "watermark_color": "#854d0e",
    "badge": "rp-quadrant--q2",
}

Q3 = {
    "code": "Q3",
    "label": "Improve first",
    "description": "Important but unsatisfying. Find the cause, then rework content, method or support.",
    "point_color": "#2563eb",
    "background": "#eff6ff",
    "watermark_color": "#1e40af",
    "badge": "rp-quadrant--q3",
}

Q4 = {
    "code": "Q4",
    "label": "Review for discontinuation",
    "description": "Low importance and low satisfaction. Stop, merge, or replace it with another activity.",
    "point_color": "#dc2626",
    "background": "#fef2f2",
    "watermark_color": "#991b1b",
    "badge": "rp-quadrant--q4",
}

QUADRANTS: dict[str, dict] = {q["code"]: q for q in (Q1, Q2, Q3, Q4)}


def classify(importance: float, satisfaction: float, midpoint: float) -> dict:
    """Return the quadrant definition for a scored activity."""
    high_importance = importance >= midpoint
    high_satisfaction = satisfaction >= midpoint
    if high_importance and high_satisfaction:
        return Q1
    if high_satisfaction:
        return Q2
    if high_importance:
        return Q3
    return Q4


def get_quadrant(code: str) -> dict | None:
    """Get a quadrant definition by code."""
    return QUADRANTS.get(code)
