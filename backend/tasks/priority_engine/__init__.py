# tasks/priority_engine/__init__.py
"""
Priority Engine Package
=======================

Deterministic, rule-based triage for backlog tasks. Given a task snapshot
and an explicit "now", the engine returns a bounded score, an Eisenhower
category and a plain-language justification.

Modules:
--------
- snapshot: Validated engine input (TaskSnapshot) and input errors
- keywords: Business-context keyword tiers and their points rules
- categories: Eisenhower buckets and the urgent/important gates
- reasoning: Justification sentence assembly
- scoring: PriorityEngine, the weighted four-factor scorer
- urgency: Countdown tiers for display (independent of scoring brackets)

Architecture:
-------------
Everything here is pure: no ORM, no I/O, no clock reads. Persistence and
scheduling live in tasks.services and tasks.tasks. The engine returns a
"priority contract":

    {
        "score": int,               # 0..100
        "category": str,            # do_first | schedule | delegate | delete
        "reasoning": str,
        "urgency_points": int,      # 5..40
        "manual_points": int,       # 5..30
        "context_points": int,      # 3..20
        "age_points": int,          # 2..10
    }

Usage:
------
    from tasks.priority_engine import TaskSnapshot, calculate_priority

    result = calculate_priority(
        TaskSnapshot(title="Fix payment bug", created_at=created, due_date=due),
        now=timezone.now(),
    )
"""

from .categories import CATEGORIES, DELEGATE, DELETE, DO_FIRST, SCHEDULE
from .keywords import DEFAULT_KEYWORD_TIERS, KeywordTier
from .scoring import PriorityEngine, PriorityResult, calculate_priority, get_default_engine
from .snapshot import MANUAL_PRIORITIES, InvalidTaskInput, TaskSnapshot
from .urgency import URGENCY_TIERS, UrgencyDisplay, present_urgency

__all__ = [
    # Core classes
    "PriorityEngine",
    "PriorityResult",
    "TaskSnapshot",
    "KeywordTier",
    "UrgencyDisplay",
    "InvalidTaskInput",
    # Functions
    "calculate_priority",
    "get_default_engine",
    "present_urgency",
    # Constants
    "CATEGORIES",
    "DO_FIRST",
    "SCHEDULE",
    "DELEGATE",
    "DELETE",
    "DEFAULT_KEYWORD_TIERS",
    "MANUAL_PRIORITIES",
    "URGENCY_TIERS",
]
