# tasks/priority_engine/scoring.py

import datetime
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Optional

from django.conf import settings

from .categories import categorize, is_important, is_urgent
from .keywords import DEFAULT_KEYWORD_TIERS, NO_KEYWORD_POINTS, KeywordTier, with_phrases
from .reasoning import build_reasoning
from .snapshot import DateInput, InvalidTaskInput, TaskSnapshot, coerce_datetime

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 100

# Deadline urgency, by hours until due. Anything at or past the deadline is overdue.
NO_DEADLINE_POINTS = 10
OVERDUE_POINTS = 40
DEADLINE_BRACKETS = (
    (24, 35),
    (72, 25),
    (168, 15),
)
DISTANT_DEADLINE_POINTS = 5

MANUAL_PRIORITY_POINTS = {
    "critical": 30,
    "high": 22,
    "medium": 15,
    "low": 5,
}
NO_MANUAL_PRIORITY_POINTS = MANUAL_PRIORITY_POINTS["medium"]

# Task age, by days since creation (strictly greater than).
AGE_BRACKETS = (
    (30, 10),
    (14, 7),
    (7, 5),
)
FRESH_TASK_POINTS = 2


@dataclass(frozen=True)
class PriorityResult:
    """
    The engine's output contract.

    ``score``, ``category`` and ``reasoning`` are what callers persist and
    show; the four factor sub-scores are kept for auditing the decision.
    """

    score: int
    category: str
    reasoning: str
    urgency_points: int
    manual_points: int
    context_points: int
    age_points: int

    @property
    def is_urgent(self) -> bool:
        return is_urgent(self.urgency_points)

    @property
    def is_important(self) -> bool:
        return is_important(self.context_points, self.manual_points)

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class PriorityEngine:
    """
    Deterministic weighted scorer for work items.

    Four independent factors are summed and clamped to 0..100:

    - deadline urgency (5-40)
    - manual priority override (5-30)
    - business-context keywords (3-20)
    - task age (2-10)

    With the default keyword tiers the natural range is 15..100, so the
    clamp only matters for tuned tiers whose rules reach outside it.

    The Eisenhower category comes from the urgency, context and manual
    sub-scores, never from the clamped total. ``now`` is always passed in:
    the engine never reads the clock.
    """

    def __init__(
        self,
        keyword_tiers: Iterable[KeywordTier] = DEFAULT_KEYWORD_TIERS,
        whole_words: bool = False,
    ):
        """
        Args:
            keyword_tiers: Ordered keyword sets; the first tier with a match wins.
            whole_words: Match keywords on word boundaries instead of as raw substrings.
        """
        self.keyword_tiers = tuple(keyword_tiers)
        self.whole_words = whole_words

    def score(self, task: TaskSnapshot, now: DateInput) -> PriorityResult:
        now = coerce_datetime(now, "now")
        if now is None:
            raise InvalidTaskInput("now", "is required")

        urgency = self.deadline_points(task.due_date, now)
        manual = self.manual_points(task.manual_priority)
        context = self.context_points(task.text)
        age = self.age_points(task.created_at, now)

        total = max(MIN_SCORE, min(MAX_SCORE, urgency + manual + context + age))
        category = categorize(is_urgent(urgency), is_important(context, manual))

        logger.debug(
            f"Scored '{task.title}': urgency={urgency} manual={manual} "
            f"context={context} age={age} total={total} category={category}"
        )

        return PriorityResult(
            score=total,
            category=category,
            reasoning=build_reasoning(urgency, manual, context, age, category),
            urgency_points=urgency,
            manual_points=manual,
            context_points=context,
            age_points=age,
        )

    @staticmethod
    def deadline_points(due_date: Optional[datetime.datetime], now: datetime.datetime) -> int:
        if due_date is None:
            return NO_DEADLINE_POINTS

        hours_until_due = (due_date - now).total_seconds() / 3600
        if hours_until_due <= 0:
            return OVERDUE_POINTS

        for limit_hours, points in DEADLINE_BRACKETS:
            if hours_until_due < limit_hours:
                return points
        return DISTANT_DEADLINE_POINTS

    @staticmethod
    def manual_points(manual_priority: Optional[str]) -> int:
        if not manual_priority:
            return NO_MANUAL_PRIORITY_POINTS
        return MANUAL_PRIORITY_POINTS[manual_priority]

    def context_points(self, text: str) -> int:
        for tier in self.keyword_tiers:
            matches = tier.count_matches(text, whole_words=self.whole_words)
            if matches:
                return tier.points(matches)
        return NO_KEYWORD_POINTS

    @staticmethod
    def age_points(created_at: datetime.datetime, now: datetime.datetime) -> int:
        # Age is measured in whole elapsed hours.
        hours_old = int((now - created_at).total_seconds() // 3600)
        days_old = hours_old / 24

        for limit_days, points in AGE_BRACKETS:
            if days_old > limit_days:
                return points
        return FRESH_TASK_POINTS


def get_default_engine() -> PriorityEngine:
    """
    Builds an engine from ``settings.PRIORITY_ENGINE``:

        PRIORITY_ENGINE = {
            "WHOLE_WORD_MATCHING": False,
            "KEYWORDS": {"low": ["wiki", "someday"]},
        }
    """
    config = getattr(settings, "PRIORITY_ENGINE", None) or {}
    return PriorityEngine(
        keyword_tiers=with_phrases(DEFAULT_KEYWORD_TIERS, config.get("KEYWORDS")),
        whole_words=bool(config.get("WHOLE_WORD_MATCHING", False)),
    )


def calculate_priority(task: TaskSnapshot, now: DateInput) -> PriorityResult:
    """Scores ``task`` at ``now`` with the configured engine."""
    return get_default_engine().score(task, now)
