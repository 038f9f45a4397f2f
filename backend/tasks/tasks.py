# tasks/tasks.py

import logging
from typing import Any, Dict

from celery import shared_task

from .models import Task
from .services import classify_task, rescore_tasks

# Configure logging for background worker monitoring
logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_backoff_max=600,  # Max backoff of 10 minutes
    max_retries=3,
)
def rescore_task(self, task_id: int) -> Dict[str, Any]:
    """
    Worker: re-score a single task with its current fields.
    Input = task_id only; the worker fetches everything else.
    """
    logger.info(f"Re-scoring started for Task {task_id}")
    try:
        return classify_task(task_id)
    except Exception as exc:
        logger.exception(f"Re-scoring failed for Task {task_id}: {exc}")
        # Re-raise for Celery retry policy
        raise


@shared_task(
    bind=True,
    time_limit=300,
    soft_time_limit=270,
)
def rescore_open_tasks(self) -> int:
    """
    Periodic job: scores drift as deadlines approach and tasks age, so every
    task that is not done is re-scored against one shared "now".
    """
    open_tasks = Task.objects.exclude(status=Task.Status.DONE)
    return rescore_tasks(open_tasks)
