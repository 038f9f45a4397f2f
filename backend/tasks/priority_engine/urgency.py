# tasks/priority_engine/urgency.py

from dataclasses import asdict, dataclass
from typing import Dict

from .snapshot import DateInput, InvalidTaskInput, coerce_datetime

TIER_NONE = "none"
TIER_OVERDUE = "overdue"
TIER_CRITICAL = "critical"
TIER_URGENT = "urgent"
TIER_WARNING = "warning"
TIER_SAFE = "safe"

URGENCY_TIERS = (TIER_NONE, TIER_OVERDUE, TIER_CRITICAL, TIER_URGENT, TIER_WARNING, TIER_SAFE)

# Display-only thresholds. These are deliberately not shared with the scoring
# brackets in scoring.py: whole units, day based, with a same-day grace period.
CRITICAL_HOURS = 24
URGENT_DAYS = 3
WARNING_DAYS = 7

BADGE_VARIANTS = {
    TIER_NONE: "secondary",
    TIER_OVERDUE: "destructive",
    TIER_CRITICAL: "destructive",
    TIER_URGENT: "default",
    TIER_WARNING: "outline",
    TIER_SAFE: "secondary",
}


@dataclass(frozen=True)
class UrgencyDisplay:
    tier: str
    display_text: str
    badge_variant: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


def _display(tier: str, text: str) -> UrgencyDisplay:
    return UrgencyDisplay(tier=tier, display_text=text, badge_variant=BADGE_VARIANTS[tier])


def present_urgency(due_date: DateInput, now: DateInput) -> UrgencyDisplay:
    """
    Maps a due date to a countdown tier for rendering.

    Tiers:
        none      no due date
        overdue   past due, and not on the same calendar day as ``now``
        critical  fewer than 24 whole hours left (includes "due today")
        urgent    fewer than 3 whole days left
        warning   fewer than 7 whole days left
        safe      7 days or more

    The calendar day is the one of ``now``'s timezone, so callers should
    pass a local ``now`` when the grace period must follow the user's day.
    """
    now = coerce_datetime(now, "now")
    if now is None:
        raise InvalidTaskInput("now", "is required")

    due = coerce_datetime(due_date, "due_date")
    if due is None:
        return _display(TIER_NONE, "No deadline")

    same_day = due.astimezone(now.tzinfo).date() == now.date()
    if due < now and not same_day:
        return _display(TIER_OVERDUE, "Overdue")

    seconds_left = (due - now).total_seconds()
    hours_left = int(seconds_left / 3600)
    days_left = int(seconds_left / 86400)

    if hours_left < CRITICAL_HOURS:
        text = "Due today" if seconds_left <= 0 else f"{hours_left}h left"
        return _display(TIER_CRITICAL, text)
    if days_left < URGENT_DAYS:
        return _display(TIER_URGENT, f"{days_left}d left")
    if days_left < WARNING_DAYS:
        return _display(TIER_WARNING, f"{days_left}d left")
    return _display(TIER_SAFE, f"{days_left}d left")
