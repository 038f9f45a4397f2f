# tasks/priority_engine/reasoning.py

from typing import List

from .categories import DELEGATE, DELETE, DO_FIRST, SCHEDULE

CATEGORY_EXPLANATIONS = {
    DO_FIRST: "Do this immediately - urgent and important",
    SCHEDULE: "Schedule focused time - important but not urgent",
    DELEGATE: "Consider delegating - urgent but less important",
    DELETE: "Reconsider if this is necessary - neither urgent nor important",
}


def _urgency_clause(points: int) -> str:
    if points >= 35:
        return "extremely urgent deadline"
    if points >= 25:
        return "approaching deadline"
    if points >= 15:
        return "moderate deadline pressure"
    return ""


def _manual_clause(points: int) -> str:
    if points >= 25:
        return "manually marked as critical"
    if points >= 20:
        return "manually marked as high priority"
    return ""


def _context_clause(points: int) -> str:
    if points >= 15:
        return "contains high-value business keywords"
    if points <= 5:
        return "appears to be low-priority maintenance work"
    return ""


def _age_clause(points: int) -> str:
    return "has been pending for a while" if points >= 7 else ""


def build_reasoning(urgency: int, manual: int, context: int, age: int, category: str) -> str:
    """
    Assembles the human-readable justification for a score.

    Situational clauses come first, comma-joined and capitalized, followed
    by the fixed explanation of the category:

        "Extremely urgent deadline, contains high-value business keywords.
         Do this immediately - urgent and important."
    """
    clauses: List[str] = [
        clause for clause in (
            _urgency_clause(urgency),
            _manual_clause(manual),
            _context_clause(context),
            _age_clause(age),
        )
        if clause
    ]
    explanation = f"{CATEGORY_EXPLANATIONS[category]}."

    if not clauses:
        return explanation

    situation = ", ".join(clauses)
    return f"{situation[0].upper()}{situation[1:]}. {explanation}"
