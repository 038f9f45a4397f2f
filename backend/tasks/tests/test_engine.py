# tasks/tests/test_engine.py
"""
Priority Engine Unit Tests
==========================

Test suite for the deterministic scoring "brain" of the triage system.

This module tests:
1. Deadline urgency brackets (hours until due)
2. Manual priority lookup
3. Business-context keyword tiers and their precedence
4. Task age brackets
5. Eisenhower category gates
6. Reasoning sentences
7. Input validation

Test Philosophy:
----------------
- "now" is always fixed and passed in; nothing reads the clock
- Test boundaries exactly (24h, 72h, 168h, 7/14/30 days)
- Tests are pure and need no database
"""

from __future__ import annotations

import datetime
import itertools

from django.test import SimpleTestCase, override_settings

from tasks.priority_engine import (
    CATEGORIES,
    DELEGATE,
    DELETE,
    DO_FIRST,
    SCHEDULE,
    InvalidTaskInput,
    KeywordTier,
    PriorityEngine,
    TaskSnapshot,
    calculate_priority,
    get_default_engine,
)
from tasks.priority_engine.categories import categorize, is_important, is_urgent
from tasks.priority_engine.keywords import DEFAULT_KEYWORD_TIERS, with_phrases


FIXED_NOW = datetime.datetime(2024, 1, 15, 12, 0, 0, tzinfo=datetime.timezone.utc)


def make_task(
    title: str = "Water the plants",
    description: str | None = None,
    due_in: datetime.timedelta | None = None,
    manual_priority: str | None = None,
    age: datetime.timedelta = datetime.timedelta(0),
) -> TaskSnapshot:
    """Build a snapshot relative to FIXED_NOW."""
    return TaskSnapshot(
        title=title,
        description=description,
        due_date=FIXED_NOW + due_in if due_in is not None else None,
        manual_priority=manual_priority,
        created_at=FIXED_NOW - age,
    )


def hours(n: float) -> datetime.timedelta:
    return datetime.timedelta(hours=n)


def days(n: float) -> datetime.timedelta:
    return datetime.timedelta(days=n)


# ===========================================================================
# END-TO-END SCENARIOS
# ===========================================================================


class TestScoringScenarios(SimpleTestCase):
    """Worked examples covering all four factors at once."""

    def setUp(self) -> None:
        self.engine = PriorityEngine()

    def test_client_bug_due_soon_is_do_first(self) -> None:
        """Urgent deadline + three high-value keywords -> do_first."""
        task = make_task(title="Fix critical payment bug", due_in=hours(12), age=days(2))

        result = self.engine.score(task, FIXED_NOW)

        # 35 (<24h) + 15 (default manual) + 20 (3 high hits, capped) + 2 (fresh)
        self.assertEqual(result.urgency_points, 35)
        self.assertEqual(result.manual_points, 15)
        self.assertEqual(result.context_points, 20)
        self.assertEqual(result.age_points, 2)
        self.assertEqual(result.score, 72)
        self.assertEqual(result.category, DO_FIRST)
        self.assertEqual(
            result.reasoning,
            "Extremely urgent deadline, contains high-value business keywords. "
            "Do this immediately - urgent and important.",
        )

    def test_old_documentation_task_is_delete(self) -> None:
        """No deadline, maintenance keyword, 40 days old -> delete."""
        task = make_task(title="Update documentation", age=days(40))

        result = self.engine.score(task, FIXED_NOW)

        # 10 (no date) + 15 (default manual) + 8 (1 low hit) + 10 (>30d)
        self.assertEqual(result.score, 43)
        self.assertEqual(result.context_points, 8)
        self.assertEqual(result.age_points, 10)
        self.assertFalse(result.is_urgent)
        self.assertFalse(result.is_important)
        self.assertEqual(result.category, DELETE)
        self.assertEqual(
            result.reasoning,
            "Has been pending for a while. "
            "Reconsider if this is necessary - neither urgent nor important.",
        )

    def test_manual_critical_far_deadline_is_schedule(self) -> None:
        """A critical override makes a distant task important but not urgent."""
        task = make_task(
            title="Internal cleanup task",
            manual_priority="critical",
            due_in=days(20),
        )

        result = self.engine.score(task, FIXED_NOW)

        # 5 (>168h) + 30 (critical) + 8 (1 low hit) + 2 (fresh)
        self.assertEqual(result.score, 45)
        self.assertEqual(result.category, SCHEDULE)
        self.assertEqual(
            result.reasoning,
            "Manually marked as critical. "
            "Schedule focused time - important but not urgent.",
        )

    def test_urgent_but_unimportant_is_delegate(self) -> None:
        task = make_task(due_in=hours(12), manual_priority="low")

        result = self.engine.score(task, FIXED_NOW)

        self.assertEqual(result.score, 35 + 5 + 10 + 2)
        self.assertEqual(result.category, DELEGATE)

    def test_calculate_priority_uses_default_engine(self) -> None:
        task = make_task(title="Fix critical payment bug", due_in=hours(12), age=days(2))

        self.assertEqual(
            calculate_priority(task, FIXED_NOW),
            PriorityEngine().score(task, FIXED_NOW),
        )


# ===========================================================================
# DEADLINE URGENCY TESTS
# ===========================================================================


class TestDeadlinePoints(SimpleTestCase):
    """
    Brackets are strict "less than" on fractional hours until due, with
    the overdue check (<= 0 hours) taking precedence.
    """

    def _points(self, due_in: datetime.timedelta | None) -> int:
        due = FIXED_NOW + due_in if due_in is not None else None
        return PriorityEngine.deadline_points(due, FIXED_NOW)

    def test_no_due_date(self) -> None:
        self.assertEqual(self._points(None), 10)

    def test_due_exactly_now_is_overdue(self) -> None:
        """Zero hours left is overdue (40), not the <24h bracket (35)."""
        self.assertEqual(self._points(hours(0)), 40)

    def test_past_due_is_overdue(self) -> None:
        self.assertEqual(self._points(-datetime.timedelta(minutes=1)), 40)
        self.assertEqual(self._points(-days(100)), 40)

    def test_just_ahead_of_now_is_critical_bracket(self) -> None:
        self.assertEqual(self._points(datetime.timedelta(seconds=1)), 35)

    def test_bracket_boundaries(self) -> None:
        cases = [
            (hours(23.99), 35),
            (hours(24), 25),
            (hours(71.99), 25),
            (hours(72), 15),
            (hours(167.99), 15),
            (hours(168), 5),
            (days(365), 5),
        ]
        for due_in, expected in cases:
            with self.subTest(due_in=due_in):
                self.assertEqual(self._points(due_in), expected)

    def test_monotonic_as_deadline_approaches(self) -> None:
        """Less time left never lowers the urgency points."""
        offsets = [hours(h) for h in (400, 168, 167, 100, 72, 71, 30, 24, 23, 1, 0, -5)]
        points = [self._points(o) for o in offsets]

        self.assertEqual(points, sorted(points))


# ===========================================================================
# MANUAL PRIORITY TESTS
# ===========================================================================


class TestManualPoints(SimpleTestCase):

    def test_lookup(self) -> None:
        expected = {"critical": 30, "high": 22, "medium": 15, "low": 5}
        for level, points in expected.items():
            with self.subTest(level=level):
                self.assertEqual(PriorityEngine.manual_points(level), points)

    def test_absent_defaults_to_medium(self) -> None:
        self.assertEqual(PriorityEngine.manual_points(None), 15)

    def test_blank_string_is_treated_as_absent(self) -> None:
        task = make_task(manual_priority="")

        self.assertIsNone(task.manual_priority)
        self.assertEqual(PriorityEngine().score(task, FIXED_NOW).manual_points, 15)


# ===========================================================================
# BUSINESS CONTEXT KEYWORD TESTS
# ===========================================================================


class TestContextPoints(SimpleTestCase):

    def setUp(self) -> None:
        self.engine = PriorityEngine()

    def _points(self, title: str, description: str | None = None) -> int:
        return self.engine.context_points(make_task(title=title, description=description).text)

    def test_no_keywords_defaults_to_ten(self) -> None:
        self.assertEqual(self._points("Water the plants"), 10)

    def test_single_high_value_keyword(self) -> None:
        self.assertEqual(self._points("Call the client"), 7)

    def test_high_value_is_capped_at_twenty(self) -> None:
        self.assertEqual(self._points("Urgent client invoice payment"), 20)

    def test_high_value_overrides_medium_and_low(self) -> None:
        """Any high hit decides: medium/low hits are ignored entirely."""
        self.assertEqual(self._points("Refactor client invoice feature"), 14)

    def test_medium_value_keywords(self) -> None:
        self.assertEqual(self._points("Build landing page"), 5)
        self.assertEqual(self._points("Implement design review"), 15)

    def test_medium_value_overrides_low(self) -> None:
        self.assertEqual(self._points("Research and design the onboarding"), 5)

    def test_low_value_hits_push_score_down_to_floor(self) -> None:
        self.assertEqual(self._points("Refactor sidebar"), 8)
        self.assertEqual(self._points("Refactor and optimize sidebar"), 6)
        self.assertEqual(self._points("Maybe refactor and optimize, eventually"), 3)

    def test_description_is_scanned(self) -> None:
        self.assertEqual(self._points("Look into it", description="Production is DOWN"), 14)

    def test_each_keyword_counts_once(self) -> None:
        self.assertEqual(self._points("Bug bug bug"), 7)

    def test_substring_matching_is_default(self) -> None:
        """'deploy' matches inside 'deployment'."""
        self.assertEqual(self._points("Deployment checklist"), 7)

    def test_whole_word_matching_opt_in(self) -> None:
        engine = PriorityEngine(whole_words=True)
        text = make_task(title="Deployment checklist").text

        self.assertEqual(engine.context_points(text), 10)
        self.assertEqual(engine.context_points(make_task(title="Deploy hotfix").text), 7)


class TestKeywordConfiguration(SimpleTestCase):

    def test_tier_phrases_are_normalized_to_lowercase(self) -> None:
        tier = KeywordTier(name="x", phrases=frozenset({" Wiki "}), base=0, per_match=1, floor=0, ceiling=5)

        self.assertEqual(tier.phrases, frozenset({"wiki"}))

    def test_floor_above_ceiling_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            KeywordTier(name="x", phrases=frozenset(), base=0, per_match=1, floor=10, ceiling=5)

    def test_with_phrases_replaces_named_tier_only(self) -> None:
        tiers = with_phrases(DEFAULT_KEYWORD_TIERS, {"low": ["Someday"]})

        self.assertEqual([t.name for t in tiers], ["high", "medium", "low"])
        self.assertEqual(tiers[2].phrases, frozenset({"someday"}))
        self.assertEqual(tiers[0], DEFAULT_KEYWORD_TIERS[0])

    def test_with_phrases_rejects_unknown_tier(self) -> None:
        with self.assertRaises(ValueError):
            with_phrases(DEFAULT_KEYWORD_TIERS, {"bogus": ["x"]})

    def test_with_phrases_rejects_bare_string(self) -> None:
        """{"low": "wiki"} would otherwise become the letters w, i, k."""
        with self.assertRaises(ValueError) as ctx:
            with_phrases(DEFAULT_KEYWORD_TIERS, {"low": "wiki"})

        self.assertIn("low", str(ctx.exception))

    def test_total_is_clamped_for_tuned_tiers(self) -> None:
        """Default tiers top out at 100; a tuned tier can exceed it and is clamped."""
        boost = KeywordTier(name="boost", phrases=frozenset({"plants"}), base=90, per_match=0, floor=90, ceiling=90)
        engine = PriorityEngine(keyword_tiers=(boost,))
        task = make_task(due_in=hours(-1), manual_priority="critical", age=days(40))

        result = engine.score(task, FIXED_NOW)

        self.assertEqual(result.context_points, 90)
        self.assertEqual(result.score, 100)

    @override_settings(PRIORITY_ENGINE={"WHOLE_WORD_MATCHING": True, "KEYWORDS": {"low": ["someday"]}})
    def test_default_engine_reads_settings(self) -> None:
        engine = get_default_engine()

        self.assertTrue(engine.whole_words)
        self.assertEqual(engine.keyword_tiers[2].phrases, frozenset({"someday"}))

    @override_settings(PRIORITY_ENGINE=None)
    def test_default_engine_without_settings(self) -> None:
        engine = get_default_engine()

        self.assertFalse(engine.whole_words)
        self.assertEqual(engine.keyword_tiers, DEFAULT_KEYWORD_TIERS)


# ===========================================================================
# TASK AGE TESTS
# ===========================================================================


class TestAgePoints(SimpleTestCase):

    def _points(self, age: datetime.timedelta) -> int:
        return PriorityEngine.age_points(FIXED_NOW - age, FIXED_NOW)

    def test_bracket_boundaries(self) -> None:
        cases = [
            (hours(0), 2),
            (days(7), 2),
            (days(7) + datetime.timedelta(minutes=30), 2),
            (days(7) + hours(1), 5),
            (days(14), 5),
            (days(14) + hours(1), 7),
            (days(30), 7),
            (days(30) + hours(1), 10),
            (days(400), 10),
        ]
        for age, expected in cases:
            with self.subTest(age=age):
                self.assertEqual(self._points(age), expected)

    def test_created_in_the_future_counts_as_fresh(self) -> None:
        self.assertEqual(self._points(-days(3)), 2)

    def test_monotonic_in_age(self) -> None:
        points = [self._points(days(d)) for d in range(0, 60)]

        self.assertEqual(points, sorted(points))


# ===========================================================================
# CATEGORY GATE TESTS
# ===========================================================================


class TestCategoryGates(SimpleTestCase):

    def test_matrix_is_exhaustive_and_exclusive(self) -> None:
        table = {
            (True, True): DO_FIRST,
            (False, True): SCHEDULE,
            (True, False): DELEGATE,
            (False, False): DELETE,
        }
        for (urgent, important), expected in table.items():
            with self.subTest(urgent=urgent, important=important):
                self.assertEqual(categorize(urgent, important), expected)

        self.assertEqual(sorted(table.values()), sorted(CATEGORIES))

    def test_urgent_gate(self) -> None:
        self.assertTrue(is_urgent(20))
        self.assertTrue(is_urgent(25))
        self.assertFalse(is_urgent(15))

    def test_important_gate(self) -> None:
        self.assertTrue(is_important(12, 5))
        self.assertTrue(is_important(3, 20))
        self.assertFalse(is_important(11, 19))

    def test_category_uses_sub_scores_not_total(self) -> None:
        """A high total can still be 'delete' when no single gate opens."""
        task = make_task(title="Water the plants", due_in=days(5), age=days(60))

        result = PriorityEngine().score(task, FIXED_NOW)

        # 15 + 15 + 10 + 10 = 50, urgency 15 < 20, context 10 < 12, manual 15 < 20
        self.assertEqual(result.score, 50)
        self.assertEqual(result.category, DELETE)


# ===========================================================================
# REASONING TESTS
# ===========================================================================


class TestReasoning(SimpleTestCase):

    def setUp(self) -> None:
        self.engine = PriorityEngine()

    def test_only_category_sentence_when_nothing_stands_out(self) -> None:
        result = self.engine.score(make_task(), FIXED_NOW)

        self.assertEqual(
            result.reasoning,
            "Reconsider if this is necessary - neither urgent nor important.",
        )

    def test_moderate_deadline_and_high_override(self) -> None:
        result = self.engine.score(make_task(due_in=hours(100), manual_priority="high"), FIXED_NOW)

        self.assertEqual(
            result.reasoning,
            "Moderate deadline pressure, manually marked as high priority. "
            "Schedule focused time - important but not urgent.",
        )

    def test_approaching_deadline(self) -> None:
        result = self.engine.score(make_task(due_in=hours(48), manual_priority="low"), FIXED_NOW)

        self.assertEqual(
            result.reasoning,
            "Approaching deadline. Consider delegating - urgent but less important.",
        )

    def test_low_priority_maintenance(self) -> None:
        task = make_task(title="Maybe refactor and optimize, eventually", age=days(20))

        result = self.engine.score(task, FIXED_NOW)

        self.assertEqual(
            result.reasoning,
            "Appears to be low-priority maintenance work, has been pending for a while. "
            "Reconsider if this is necessary - neither urgent nor important.",
        )


# ===========================================================================
# GLOBAL PROPERTIES
# ===========================================================================


class TestEngineProperties(SimpleTestCase):

    def test_score_bounds_and_category_over_input_grid(self) -> None:
        engine = PriorityEngine()
        titles = ["Water the plants", "Fix critical payment bug", "Refactor sidebar", "Build feature"]
        dues = [None, hours(-10), hours(0), hours(5), hours(50), hours(100), days(30)]
        manuals = [None, "low", "medium", "high", "critical"]
        ages = [hours(0), days(8), days(15), days(31)]

        for title, due_in, manual, age in itertools.product(titles, dues, manuals, ages):
            result = engine.score(
                make_task(title=title, due_in=due_in, manual_priority=manual, age=age),
                FIXED_NOW,
            )
            self.assertGreaterEqual(result.score, 15)
            self.assertLessEqual(result.score, 100)
            self.assertIn(result.category, CATEGORIES)
            self.assertTrue(result.reasoning)

    def test_deterministic_for_same_inputs(self) -> None:
        task = make_task(title="Client demo prep", due_in=hours(30), manual_priority="high", age=days(9))

        first = PriorityEngine().score(task, FIXED_NOW)
        second = PriorityEngine().score(task, FIXED_NOW)

        self.assertEqual(first, second)
        self.assertEqual(first.as_dict(), second.as_dict())

    def test_as_dict_contract(self) -> None:
        result = PriorityEngine().score(make_task(), FIXED_NOW)

        self.assertEqual(
            set(result.as_dict()),
            {"score", "category", "reasoning", "urgency_points",
             "manual_points", "context_points", "age_points"},
        )


# ===========================================================================
# INPUT VALIDATION TESTS
# ===========================================================================


class TestSnapshotValidation(SimpleTestCase):

    def test_empty_title_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="   ", created_at=FIXED_NOW)

        self.assertEqual(ctx.exception.field, "title")

    def test_missing_created_at_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="Task", created_at=None)

        self.assertEqual(ctx.exception.field, "created_at")

    def test_unparseable_due_date_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="Task", created_at=FIXED_NOW, due_date="next tuesday")

        self.assertEqual(ctx.exception.field, "due_date")
        self.assertIn("next tuesday", str(ctx.exception))

    def test_out_of_range_date_string_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="Task", created_at="2024-02-30T10:00:00Z")

        self.assertEqual(ctx.exception.field, "created_at")

    def test_unknown_manual_priority_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="Task", created_at=FIXED_NOW, manual_priority="urgent")

        self.assertEqual(ctx.exception.field, "manual_priority")

    def test_wrong_type_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            TaskSnapshot(title="Task", created_at=12345)

        self.assertEqual(ctx.exception.field, "created_at")

    def test_invalid_input_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            TaskSnapshot(title="", created_at=FIXED_NOW)

    def test_missing_now_is_rejected(self) -> None:
        with self.assertRaises(InvalidTaskInput) as ctx:
            PriorityEngine().score(make_task(), None)

        self.assertEqual(ctx.exception.field, "now")

    def test_iso_strings_are_accepted(self) -> None:
        from_strings = TaskSnapshot(
            title="Task",
            created_at="2024-01-13T12:00:00Z",
            due_date="2024-01-16T00:00:00+00:00",
        )

        self.assertEqual(from_strings.created_at, FIXED_NOW - days(2))
        self.assertEqual(from_strings.due_date, FIXED_NOW + hours(12))

    def test_naive_datetimes_are_read_as_utc(self) -> None:
        naive = TaskSnapshot(
            title="Fix critical payment bug",
            created_at=datetime.datetime(2024, 1, 13, 12, 0),
            due_date=datetime.datetime(2024, 1, 16, 0, 0),
        )
        aware = make_task(title="Fix critical payment bug", due_in=hours(12), age=days(2))

        self.assertEqual(
            PriorityEngine().score(naive, datetime.datetime(2024, 1, 15, 12, 0)),
            PriorityEngine().score(aware, FIXED_NOW),
        )

    def test_plain_date_is_midnight_utc(self) -> None:
        task = TaskSnapshot(title="Task", created_at=datetime.date(2024, 1, 15))

        self.assertEqual(task.created_at, datetime.datetime(2024, 1, 15, tzinfo=datetime.timezone.utc))
