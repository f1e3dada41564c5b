"""
Task business rules on top of a TaskRepository.

The service owns the invariants the repositories know nothing about:
ids and timestamps are assigned here, ``updated_at`` strictly increases on
every mutation and ``ai_score`` is recomputed from the task's current
state. Each operation builds the complete new record before storing it.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from django.utils import timezone

from .entities import Task
from .exceptions import TaskNotFound
from .repository import TaskFilter, TaskRepository, get_task_repository
from .scoring import score_task, sort_tasks


logger = logging.getLogger(__name__)


def next_timestamp(previous: Optional[datetime], now: datetime) -> datetime:
    """``now``, bumped past ``previous`` if the clock has not moved on."""
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class TaskService:

    def __init__(self, repository: TaskRepository):
        self.repository = repository

    def all_tasks(self) -> List[Task]:
        return self.repository.list()

    def list_tasks(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        tasks = sort_tasks(self.repository.list(task_filter))
        logger.debug("Listed %d task(s) with %s", len(tasks), task_filter)
        return tasks

    def get_task(self, task_id: str) -> Task:
        task = self.repository.get(task_id)
        if task is None:
            raise TaskNotFound()
        return task

    def create_task(self, data: Dict) -> Task:
        """
        Create a task from validated input.

        Args:
            data: title, category and priority plus any of description,
                  due_date, estimate and completed
        """
        now = timezone.now()
        task = Task(id=str(uuid.uuid4()), created_at=now, updated_at=now, **data)
        if task.completed:
            task.completed_at = now
        task.ai_score = score_task(task, now)

        task = self.repository.add(task)
        logger.info("Created task %s (category=%s, score=%d)", task.id, task.category, task.ai_score)
        return task

    def update_task(self, task_id: str, changes: Dict) -> Task:
        current = self.get_task(task_id)
        now = timezone.now()

        task = replace(current, **changes)
        if task.completed != current.completed:
            task.completed_at = now if task.completed else None
        task.updated_at = next_timestamp(current.updated_at, now)
        task.ai_score = score_task(task, now)

        task = self.repository.save(task)
        logger.info("Updated task %s fields=%s score=%d", task.id, sorted(changes), task.ai_score)
        return task

    def toggle_task(self, task_id: str) -> Task:
        current = self.get_task(task_id)
        now = timezone.now()

        task = replace(current, completed=not current.completed)
        task.completed_at = now if task.completed else None
        task.updated_at = next_timestamp(current.updated_at, now)
        task.ai_score = score_task(task, now)

        task = self.repository.save(task)
        logger.info("Toggled task %s completed=%s", task.id, task.completed)
        return task

    def delete_task(self, task_id: str) -> Task:
        task = self.repository.delete(task_id)
        if task is None:
            raise TaskNotFound()
        logger.info("Deleted task %s", task_id)
        return task


def get_task_service() -> TaskService:
    return TaskService(get_task_repository())
