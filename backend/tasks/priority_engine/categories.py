# tasks/priority_engine/categories.py

# Eisenhower matrix buckets
DO_FIRST = "do_first"
SCHEDULE = "schedule"
DELEGATE = "delegate"
DELETE = "delete"

CATEGORIES = (DO_FIRST, SCHEDULE, DELEGATE, DELETE)

# Gate thresholds, applied to the factor sub-scores rather than the total.
URGENT_MIN_URGENCY = 20
IMPORTANT_MIN_CONTEXT = 12
IMPORTANT_MIN_MANUAL = 20


def is_urgent(urgency_points: int) -> bool:
    return urgency_points >= URGENT_MIN_URGENCY


def is_important(context_points: int, manual_points: int) -> bool:
    return context_points >= IMPORTANT_MIN_CONTEXT or manual_points >= IMPORTANT_MIN_MANUAL


def categorize(urgent: bool, important: bool) -> str:
    if urgent and important:
        return DO_FIRST
    if important:
        return SCHEDULE
    if urgent:
        return DELEGATE
    return DELETE
