"""
Task Model for Task Tide.

Durable storage used by DjangoTaskRepository. The default deployment keeps
tasks in memory and never touches this table.
"""

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from .entities import (
    Category,
    Priority,
    TITLE_MAX_LENGTH,
    DESCRIPTION_MAX_LENGTH,
    ESTIMATE_MIN_HOURS,
    ESTIMATE_MAX_HOURS,
    DEFAULT_ESTIMATE_HOURS,
)


class TaskRecord(models.Model):
    """
    Persisted form of a Task.

    Timestamps are written by TaskService rather than auto_now so the
    in-memory and ORM repositories behave identically.
    """

    id = models.CharField(max_length=36, primary_key=True)
    title = models.CharField(max_length=TITLE_MAX_LENGTH)
    description = models.TextField(max_length=DESCRIPTION_MAX_LENGTH, blank=True, default='')
    category = models.CharField(
        max_length=16,
        choices=[(c.value, c.name.title()) for c in Category]
    )
    priority = models.CharField(
        max_length=8,
        choices=[(p.value, p.name.title()) for p in Priority]
    )
    due_date = models.DateTimeField(null=True, blank=True)
    estimate = models.FloatField(
        default=DEFAULT_ESTIMATE_HOURS,
        validators=[MinValueValidator(ESTIMATE_MIN_HOURS), MaxValueValidator(ESTIMATE_MAX_HOURS)]
    )
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()
    ai_score = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)]
    )

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} (AI score: {self.ai_score})"
