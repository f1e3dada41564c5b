"""
Task repositories.

TaskService talks to storage only through the TaskRepository protocol, so
the in-memory store can be swapped for the ORM one (or anything else)
through the TASK_TIDE['REPOSITORY'] setting.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Protocol

from django.conf import settings
from django.utils.module_loading import import_string

from .entities import Task


logger = logging.getLogger(__name__)

ALL = 'all'


@dataclass
class TaskFilter:
    """
    AND-combined listing filters.

    category/priority: exact match; None, '' or 'all' disables the filter.
    completed: None disables the filter.
    """
    category: Optional[str] = None
    priority: Optional[str] = None
    completed: Optional[bool] = None

    @staticmethod
    def is_active(value: Optional[str]) -> bool:
        return bool(value) and value != ALL

    def matches(self, task: Task) -> bool:
        if self.is_active(self.category) and task.category != self.category:
            return False
        if self.is_active(self.priority) and task.priority != self.priority:
            return False
        if self.completed is not None and task.completed != self.completed:
            return False
        return True


class TaskRepository(Protocol):
    """Storage port for tasks. Returned tasks are detached copies."""

    def add(self, task: Task) -> Task: ...

    def get(self, task_id: str) -> Optional[Task]: ...

    def save(self, task: Task) -> Task: ...

    def delete(self, task_id: str) -> Optional[Task]: ...

    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]: ...

    def clear(self) -> None: ...


class InMemoryTaskRepository:
    """Process-lifetime store; empty at start, gone at stop."""

    def __init__(self):
        self._tasks: Dict[str, Task] = {}

    def add(self, task: Task) -> Task:
        self._tasks[task.id] = replace(task)
        return replace(task)

    def get(self, task_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        return replace(task) if task else None

    def save(self, task: Task) -> Task:
        # Last write wins.
        self._tasks[task.id] = replace(task)
        return replace(task)

    def delete(self, task_id: str) -> Optional[Task]:
        return self._tasks.pop(task_id, None)

    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        task_filter = task_filter or TaskFilter()
        return [replace(t) for t in self._tasks.values() if task_filter.matches(t)]

    def clear(self) -> None:
        self._tasks.clear()

    def __len__(self):
        return len(self._tasks)


class DjangoTaskRepository:
    """Durable store backed by the TaskRecord model."""

    FIELDS = (
        'title', 'description', 'category', 'priority', 'due_date', 'estimate',
        'completed', 'completed_at', 'created_at', 'updated_at', 'ai_score',
    )

    def __init__(self):
        from .models import TaskRecord
        self.model = TaskRecord

    def _to_task(self, record) -> Task:
        return Task(id=record.id, **{name: getattr(record, name) for name in self.FIELDS})

    def add(self, task: Task) -> Task:
        record = self.model.objects.create(id=task.id, **{name: getattr(task, name) for name in self.FIELDS})
        return self._to_task(record)

    def get(self, task_id: str) -> Optional[Task]:
        record = self.model.objects.filter(pk=task_id).first()
        return self._to_task(record) if record else None

    def save(self, task: Task) -> Task:
        record, _ = self.model.objects.update_or_create(
            id=task.id,
            defaults={name: getattr(task, name) for name in self.FIELDS}
        )
        return self._to_task(record)

    def delete(self, task_id: str) -> Optional[Task]:
        record = self.model.objects.filter(pk=task_id).first()
        if record is None:
            return None
        task = self._to_task(record)
        record.delete()
        return task

    def list(self, task_filter: Optional[TaskFilter] = None) -> List[Task]:
        task_filter = task_filter or TaskFilter()
        queryset = self.model.objects.all()
        if task_filter.is_active(task_filter.category):
            queryset = queryset.filter(category=task_filter.category)
        if task_filter.is_active(task_filter.priority):
            queryset = queryset.filter(priority=task_filter.priority)
        if task_filter.completed is not None:
            queryset = queryset.filter(completed=task_filter.completed)
        return [self._to_task(record) for record in queryset]

    def clear(self) -> None:
        self.model.objects.all().delete()


_repositories: Dict[str, TaskRepository] = {}


def get_task_repository() -> TaskRepository:
    """Return the configured repository, created once per process."""
    path = settings.TASK_TIDE['REPOSITORY']
    repository = _repositories.get(path)
    if repository is None:
        repository = import_string(path)()
        _repositories[path] = repository
        logger.info("Task repository ready: %s", path)
    return repository


def reset_task_repositories() -> None:
    """Drop every cached repository instance (used by tests)."""
    _repositories.clear()
