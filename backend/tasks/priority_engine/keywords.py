# tasks/priority_engine/keywords.py

import re
from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, Optional, Tuple


@dataclass(frozen=True)
class KeywordTier:
    """
    One business-context keyword set and the points rule applied to it.

    points = clamp(base + per_match * matches, floor, ceiling)

    A positive ``per_match`` rewards hits (high/medium value words), a
    negative one penalizes them (maintenance work sinks with every hit).
    """

    name: str
    phrases: FrozenSet[str]
    base: int
    per_match: int
    floor: int
    ceiling: int

    def __post_init__(self):
        object.__setattr__(
            self, "phrases", frozenset(p.strip().lower() for p in self.phrases if p.strip())
        )
        if self.floor > self.ceiling:
            raise ValueError(f"Keyword tier '{self.name}' has floor above ceiling.")

    def count_matches(self, text: str, whole_words: bool = False) -> int:
        """Number of distinct phrases of this tier found in ``text``."""
        if whole_words:
            return sum(
                1 for phrase in self.phrases
                if re.search(rf"\b{re.escape(phrase)}\b", text)
            )
        return sum(1 for phrase in self.phrases if phrase in text)

    def points(self, matches: int) -> int:
        return max(self.floor, min(self.ceiling, self.base + self.per_match * matches))


HIGH_VALUE = KeywordTier(
    name="high",
    phrases=frozenset({
        "client", "payment", "invoice", "bug", "production", "deploy",
        "urgent", "asap", "deadline", "meeting", "demo", "presentation",
        "critical", "error", "down", "broken", "emergency",
    }),
    base=0, per_match=7, floor=0, ceiling=20,
)

MEDIUM_VALUE = KeywordTier(
    name="medium",
    phrases=frozenset({
        "feature", "implement", "build", "develop", "design", "review",
        "milestone", "deliverable", "requirement",
    }),
    base=0, per_match=5, floor=0, ceiling=15,
)

LOW_VALUE = KeywordTier(
    name="low",
    phrases=frozenset({
        "refactor", "optimize", "cleanup", "documentation", "learn",
        "research", "explore", "consider", "maybe", "eventually",
    }),
    base=10, per_match=-2, floor=3, ceiling=10,
)

# Order is precedence: the first tier with any match decides the points.
DEFAULT_KEYWORD_TIERS: Tuple[KeywordTier, ...] = (HIGH_VALUE, MEDIUM_VALUE, LOW_VALUE)

# Points when no tier matches at all.
NO_KEYWORD_POINTS = 10


def with_phrases(
    tiers: Iterable[KeywordTier],
    overrides: Optional[Dict[str, Iterable[str]]],
) -> Tuple[KeywordTier, ...]:
    """
    Returns ``tiers`` with the phrase sets of the named tiers replaced.

    Used to tune or localize the vocabulary from settings without touching
    the points rules, e.g. ``{"low": ["wiki", "someday"]}``.
    """
    tiers = tuple(tiers)
    if not overrides:
        return tiers

    known = {tier.name for tier in tiers}
    unknown = set(overrides) - known
    if unknown:
        raise ValueError(f"Unknown keyword tier(s): {', '.join(sorted(unknown))}")

    # A bare string would be split into single letters.
    bare = sorted(name for name, phrases in overrides.items() if isinstance(phrases, str))
    if bare:
        raise ValueError(f"Keyword tier(s) need a list of phrases, not a string: {', '.join(bare)}")

    return tuple(
        replace(tier, phrases=frozenset(overrides[tier.name])) if tier.name in overrides else tier
        for tier in tiers
    )
