from django.conf import settings
from django.core.validators import MaxValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from .priority_engine import categories, snapshot


class Task(models.Model):
    """
    A backlog item owned by a user, carrying its latest priority triage.
    """

    class Status(models.TextChoices):
        TODO = "todo", _("To do")
        IN_PROGRESS = "in_progress", _("In progress")
        REVIEW = "review", _("Review")
        DONE = "done", _("Done")

    class ManualPriority(models.TextChoices):
        LOW = snapshot.MANUAL_PRIORITY_LOW, _("Low")
        MEDIUM = snapshot.MANUAL_PRIORITY_MEDIUM, _("Medium")
        HIGH = snapshot.MANUAL_PRIORITY_HIGH, _("High")
        CRITICAL = snapshot.MANUAL_PRIORITY_CRITICAL, _("Critical")

    class Category(models.TextChoices):
        DO_FIRST = categories.DO_FIRST, _("Do first")
        SCHEDULE = categories.SCHEDULE, _("Schedule")
        DELEGATE = categories.DELEGATE, _("Delegate")
        DELETE = categories.DELETE, _("Delete")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tasks',
        verbose_name=_("owner")
    )

    title = models.CharField(max_length=200, verbose_name=_("title"))
    description = models.TextField(blank=True, verbose_name=_("description"))
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.TODO,
        verbose_name=_("status")
    )
    due_date = models.DateTimeField(
        null=True, blank=True,
        verbose_name=_("due date"),
        help_text=_("The deadline for the task.")
    )
    manual_priority = models.CharField(
        max_length=10,
        choices=ManualPriority.choices,
        null=True, blank=True,
        verbose_name=_("manual priority"),
        help_text=_("Optional human override fed into the priority score.")
    )

    # Written back by the priority engine
    priority_score = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        verbose_name=_("priority score")
    )
    eisenhower_category = models.CharField(
        max_length=10,
        choices=Category.choices,
        null=True, blank=True,
        verbose_name=_("eisenhower category")
    )
    priority_reasoning = models.TextField(blank=True, verbose_name=_("priority reasoning"))
    scored_at = models.DateTimeField(
        null=True, blank=True,
        verbose_name=_("scored at"),
        help_text=_("The instant the current score was computed for.")
    )

    position = models.IntegerField(default=0, verbose_name=_("position"))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("completed at"))
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("created at"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("updated at"))

    # Fields whose change invalidates the stored score
    SCORING_FIELDS = ('title', 'description', 'due_date', 'manual_priority')

    class Meta:
        verbose_name = _("Task")
        verbose_name_plural = _("Tasks")
        ordering = ['-priority_score', 'due_date', '-created_at']

    def __str__(self):
        return f"{self.title} ({self.priority_score})"

    @property
    def is_done(self) -> bool:
        return self.status == self.Status.DONE
