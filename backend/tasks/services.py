# tasks/services.py

import datetime
import logging
from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from .models import Task
from .priority_engine import (
    InvalidTaskInput,
    PriorityEngine,
    PriorityResult,
    TaskSnapshot,
    get_default_engine,
)

# Configure logging
logger = logging.getLogger(__name__)

PRIORITY_FIELDS = ['priority_score', 'eisenhower_category', 'priority_reasoning', 'scored_at']


def build_snapshot(task: Task, now: datetime.datetime) -> TaskSnapshot:
    """
    Reads the engine's input fields off a Task row.

    An unsaved task has no ``created_at`` yet; it is treated as created at
    ``now``, which is what the create endpoint persists a moment later.
    """
    return TaskSnapshot(
        title=task.title,
        description=task.description,
        due_date=task.due_date,
        manual_priority=task.manual_priority,
        created_at=task.created_at or now,
    )


def apply_priority(
    task: Task,
    now: Optional[datetime.datetime] = None,
    engine: Optional[PriorityEngine] = None,
) -> PriorityResult:
    """
    Scores ``task`` and writes the result onto the instance without saving.

    Callers decide when to persist (``save(update_fields=PRIORITY_FIELDS)``
    or as part of a wider save).
    """
    now = now or timezone.now()
    engine = engine or get_default_engine()

    result = engine.score(build_snapshot(task, now), now)

    task.priority_score = result.score
    task.eisenhower_category = result.category
    task.priority_reasoning = result.reasoning
    task.scored_at = now
    return result


def classify_task(task_id: int, now: Optional[datetime.datetime] = None) -> Dict[str, Any]:
    """
    Re-scores a stored task with its current fields and persists the result.

    Returns a result dict shaped for API responses:
        {"success": True, "eisenhower_category", "priority_score", "reasoning"}
    or {"success": False, "error": str} when the task does not exist. A row
    the engine rejects also fails, with the offending ``field`` added.

    Idempotent for a fixed ``now``.
    """
    now = now or timezone.now()
    try:
        # Row lock so concurrent re-scores of the same task serialize.
        with transaction.atomic():
            task = Task.objects.select_for_update().get(id=task_id)
            result = apply_priority(task, now)
            task.save(update_fields=PRIORITY_FIELDS)

    except Task.DoesNotExist:
        logger.error(f"Classification failed: Task {task_id} not found.")
        return {"success": False, "error": "Task not found"}

    except InvalidTaskInput as e:
        logger.warning(f"Classification failed: Task {task_id} is invalid: {e}")
        return {"success": False, "error": str(e), "field": e.field}

    except Exception as e:
        logger.exception(f"Unexpected error classifying Task {task_id}: {e}")
        raise

    logger.info(
        f"Classified Task {task_id}: score {result.score}, category {result.category}"
    )
    return {
        "success": True,
        "eisenhower_category": result.category,
        "priority_score": result.score,
        "reasoning": result.reasoning,
    }


def rescore_tasks(queryset: QuerySet, now: Optional[datetime.datetime] = None) -> int:
    """
    Re-scores every task in ``queryset`` against a single ``now``.

    Only rows whose score, category or reasoning actually moved are written.
    Rows the engine rejects are logged and left as they are. Returns the
    number of rows updated.
    """
    now = now or timezone.now()
    engine = get_default_engine()
    changed = []

    for task in queryset.iterator():
        before = (task.priority_score, task.eisenhower_category, task.priority_reasoning)
        try:
            apply_priority(task, now, engine=engine)
        except InvalidTaskInput as e:
            logger.warning(f"Skipping Task {task.id} during re-score: {e}")
            continue
        if (task.priority_score, task.eisenhower_category, task.priority_reasoning) != before:
            changed.append(task)

    if changed:
        Task.objects.bulk_update(changed, PRIORITY_FIELDS)

    logger.info(f"Re-scored tasks at {now.isoformat()}: {len(changed)} changed")
    return len(changed)
