# tasks/priority_engine/snapshot.py

import datetime
from dataclasses import dataclass
from typing import Optional, Union

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

DateInput = Union[datetime.datetime, datetime.date, str, None]

MANUAL_PRIORITY_LOW = "low"
MANUAL_PRIORITY_MEDIUM = "medium"
MANUAL_PRIORITY_HIGH = "high"
MANUAL_PRIORITY_CRITICAL = "critical"

MANUAL_PRIORITIES = (
    MANUAL_PRIORITY_LOW,
    MANUAL_PRIORITY_MEDIUM,
    MANUAL_PRIORITY_HIGH,
    MANUAL_PRIORITY_CRITICAL,
)


class InvalidTaskInput(ValueError):
    """
    Raised when a task snapshot violates the engine's preconditions.

    The offending field name is kept on ``field`` so callers can map the
    error back onto a form or serializer field.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


def coerce_datetime(value: DateInput, field: str) -> Optional[datetime.datetime]:
    """
    Normalizes a timestamp-like value into an aware datetime.

    Accepts aware or naive datetimes (naive values are read as UTC), plain
    dates (midnight UTC) and ISO 8601 strings. ``None`` passes through.
    """
    if value is None:
        return None

    if isinstance(value, str):
        raw = value.strip()
        try:
            parsed = parse_datetime(raw) or parse_date(raw)
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidTaskInput(field, f"could not parse '{value}' as an ISO 8601 timestamp")
        value = parsed

    if isinstance(value, datetime.datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value, datetime.timezone.utc)
        return value

    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time.min, tzinfo=datetime.timezone.utc)

    raise InvalidTaskInput(field, f"expected a timestamp, got {type(value).__name__}")


@dataclass(frozen=True)
class TaskSnapshot:
    """
    The subset of task fields the engine reads.

    Construction validates and normalizes everything up front, so a
    snapshot that exists is always scorable.
    """

    title: str
    created_at: DateInput
    description: Optional[str] = None
    due_date: DateInput = None
    manual_priority: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.title, str) or not self.title.strip():
            raise InvalidTaskInput("title", "must be a non-empty string")

        if self.description is not None and not isinstance(self.description, str):
            raise InvalidTaskInput("description", "must be a string when given")

        created_at = coerce_datetime(self.created_at, "created_at")
        if created_at is None:
            raise InvalidTaskInput("created_at", "is required")
        object.__setattr__(self, "created_at", created_at)
        object.__setattr__(self, "due_date", coerce_datetime(self.due_date, "due_date"))

        # Blank form values arrive as "", which means "no override".
        manual = self.manual_priority or None
        if manual is not None and manual not in MANUAL_PRIORITIES:
            raise InvalidTaskInput(
                "manual_priority",
                f"'{manual}' is not one of {', '.join(MANUAL_PRIORITIES)}",
            )
        object.__setattr__(self, "manual_priority", manual)

    @property
    def text(self) -> str:
        """Title and description as one lowercase blob for keyword scanning."""
        return f"{self.title} {self.description or ''}".lower()
