"""
Domain entities for Task Tide.

A task lives as a plain dataclass so the scoring, suggestion and analytics
code can run against any repository (in-memory or the ORM one) without
touching Django models.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class Category(str, Enum):
    """Fixed task categories."""
    WORK = "work"
    PERSONAL = "personal"
    HEALTH = "health"
    LEARNING = "learning"


class Priority(str, Enum):
    """Fixed task priorities."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


CATEGORY_CHOICES = [c.value for c in Category]
PRIORITY_CHOICES = [p.value for p in Priority]

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
ESTIMATE_MIN_HOURS = 0.5
ESTIMATE_MAX_HOURS = 24
DEFAULT_ESTIMATE_HOURS = 1.0


@dataclass
class Task:
    """
    A single task record.

    Attributes:
        id: Opaque unique identifier, assigned on creation
        title: Short task title (1-200 chars)
        description: Optional free text (0-1000 chars)
        category: One of Category values
        priority: One of Priority values
        due_date: Optional aware datetime
        estimate: Estimated hours (0.5-24)
        completed: Completion flag
        completed_at: When the task was last marked completed
        created_at: Creation timestamp, never changes
        updated_at: Refreshed on every mutation
        ai_score: Heuristic urgency score (0-100), derived, never set by callers
    """
    id: str
    title: str
    category: str
    priority: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    due_date: Optional[datetime] = None
    estimate: float = DEFAULT_ESTIMATE_HOURS
    completed: bool = False
    completed_at: Optional[datetime] = None
    ai_score: int = 0

    def __str__(self):
        return f"{self.title} ({self.priority}, score {self.ai_score})"
