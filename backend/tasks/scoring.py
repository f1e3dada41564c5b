"""
AI Scoring Engine for Task Tide.

This module implements the heuristic "AI score" used to rank tasks by
urgency. It is a fixed, hand-tuned linear formula, not a learned model:

Scoring Formula:
---------------
raw_score = priority_base + urgency_bonus + keyword_bonus

- priority_base: high=30, medium=20, low=10
- urgency_bonus: from days until due, ceil((due_date - now) / 1 day)
      days <= 1 (overdue included) -> +20
      days <= 3                    -> +15
      days <= 7                    -> +10
      later or no due date         -> +0
- keyword_bonus: +15 once if the title mentions any urgent keyword

ai_score = min(raw_score, 100)

Bulk prioritization additionally multiplies the raw score by a per-category
weight before rounding and clamping (see score_weighted_by_category).
Persisted tasks always use the unweighted score.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone as dt_timezone
from functools import cmp_to_key
from typing import Dict, Iterable, List, Mapping, Optional

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .entities import Task


PRIORITY_BASE_SCORES = {
    'high': 30,
    'medium': 20,
    'low': 10,
}

URGENT_KEYWORDS = ('urgent', 'asap', 'immediately', 'deadline', 'critical')

CATEGORY_WEIGHTS = {
    'work': 1.2,
    'health': 1.1,
    'learning': 1.0,
    'personal': 0.9,
}

MAX_SCORE = 100
SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Math.round semantics)."""
    return int(math.floor(value + 0.5))


def parse_due_date(value) -> Optional[datetime]:
    """
    Coerce a due date into an aware datetime.

    Accepts datetimes, dates and ISO 8601 strings. A bare ``YYYY-MM-DD``
    means midnight UTC; naive datetimes are taken in the current time zone.
    Returns None for empty or unparseable input.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value if timezone.is_aware(value) else timezone.make_aware(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=dt_timezone.utc)
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        day = parse_date(text)
        if day is not None:
            return datetime.combine(day, time.min, tzinfo=dt_timezone.utc)
        moment = parse_datetime(text)
    except ValueError:
        # Well formatted but impossible values, e.g. 2025-02-30
        return None
    if moment is None:
        return None
    return moment if timezone.is_aware(moment) else timezone.make_aware(moment)


@dataclass
class ScoreBreakdown:
    """How a task's score was assembled."""
    priority_score: int = 0
    urgency_score: int = 0
    keyword_score: int = 0
    days_until_due: Optional[int] = None
    category_weight: float = 1.0

    @property
    def raw_score(self) -> int:
        return self.priority_score + self.urgency_score + self.keyword_score


class AIScorer:
    """
    Heuristic urgency scorer.

    The tables are injectable for experimentation, but the module-level
    helpers below always use the defaults so every call site shares one
    formula.
    """

    # (upper bound in days, bonus), checked in order
    URGENCY_BUCKETS = ((1, 20), (3, 15), (7, 10))
    KEYWORD_BONUS = 15

    def __init__(
        self,
        priority_scores: Optional[Dict[str, int]] = None,
        keywords: Optional[Iterable[str]] = None,
        category_weights: Optional[Dict[str, float]] = None
    ):
        self.priority_scores = priority_scores or PRIORITY_BASE_SCORES
        self.keywords = tuple(keywords) if keywords else URGENT_KEYWORDS
        self.category_weights = category_weights or CATEGORY_WEIGHTS

    def days_until_due(self, due_date: Optional[datetime], now: datetime) -> Optional[int]:
        """Whole days until due, rounded up. Negative when overdue."""
        if due_date is None:
            return None
        return math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)

    def calculate_priority_score(self, priority) -> int:
        if not isinstance(priority, str):
            return 0
        return self.priority_scores.get(priority, 0)

    def calculate_urgency_bonus(self, days: Optional[int]) -> int:
        if days is None:
            return 0
        for limit, bonus in self.URGENCY_BUCKETS:
            if days <= limit:
                return bonus
        return 0

    def calculate_keyword_bonus(self, title: str) -> int:
        """Flat bonus if any keyword appears anywhere in the title."""
        title_lower = (title or '').lower()
        if any(keyword in title_lower for keyword in self.keywords):
            return self.KEYWORD_BONUS
        return 0

    def category_weight(self, category) -> float:
        if not isinstance(category, str):
            return 1.0
        return self.category_weights.get(category, 1.0)

    def calculate_breakdown(
        self,
        priority,
        due_date: Optional[datetime],
        title: str,
        now: Optional[datetime] = None
    ) -> ScoreBreakdown:
        if now is None:
            now = timezone.now()
        days = self.days_until_due(due_date, now)
        return ScoreBreakdown(
            priority_score=self.calculate_priority_score(priority),
            urgency_score=self.calculate_urgency_bonus(days),
            keyword_score=self.calculate_keyword_bonus(title),
            days_until_due=days,
        )

    def calculate_score(
        self,
        priority,
        due_date: Optional[datetime],
        title: str,
        now: Optional[datetime] = None
    ) -> int:
        breakdown = self.calculate_breakdown(priority, due_date, title, now)
        return min(breakdown.raw_score, MAX_SCORE)

    def calculate_weighted_score(
        self,
        priority,
        due_date: Optional[datetime],
        title: str,
        category,
        now: Optional[datetime] = None
    ) -> int:
        """Category weight is applied before clamping to MAX_SCORE."""
        breakdown = self.calculate_breakdown(priority, due_date, title, now)
        breakdown.category_weight = self.category_weight(category)
        weighted = breakdown.raw_score * breakdown.category_weight
        return min(round_half_up(weighted), MAX_SCORE)

    def prioritize(
        self,
        tasks: List[Mapping],
        now: Optional[datetime] = None
    ) -> List[Dict]:
        """
        Re-score raw task payloads and sort them by score, highest first.

        Every input mapping is copied; any incoming ``aiScore`` is replaced.
        Tasks with equal scores keep their input order.
        """
        if now is None:
            now = timezone.now()

        prioritized = []
        for task in tasks:
            data = dict(task)
            title = data.get('title') or ''
            data['aiScore'] = self.calculate_weighted_score(
                data.get('priority'),
                parse_due_date(data.get('dueDate')),
                str(title),
                data.get('category'),
                now
            )
            prioritized.append(data)

        prioritized.sort(key=lambda t: t['aiScore'], reverse=True)
        return prioritized


default_scorer = AIScorer()


def score(priority, due_date: Optional[datetime], title: str, now: Optional[datetime] = None) -> int:
    """AI score for a persisted task: priority + urgency + keywords, capped at 100."""
    return default_scorer.calculate_score(priority, due_date, title, now)


def score_weighted_by_category(
    priority,
    due_date: Optional[datetime],
    title: str,
    category,
    now: Optional[datetime] = None
) -> int:
    """AI score used by bulk prioritization, scaled by the category weight."""
    return default_scorer.calculate_weighted_score(priority, due_date, title, category, now)


def score_task(task: Task, now: Optional[datetime] = None) -> int:
    return score(task.priority, task.due_date, task.title, now)


def prioritize_tasks(tasks: List[Mapping], now: Optional[datetime] = None) -> List[Dict]:
    return default_scorer.prioritize(tasks, now)


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def compare_tasks(a: Task, b: Task) -> int:
    """
    Listing order comparator.

    Incomplete tasks first, then higher score. When both tasks have a due
    date the earlier one wins; otherwise the more recently created one does.
    """
    if a.completed != b.completed:
        return 1 if a.completed else -1
    if a.ai_score != b.ai_score:
        return b.ai_score - a.ai_score
    if a.due_date and b.due_date:
        return _sign((a.due_date - b.due_date).total_seconds())
    return _sign((b.created_at - a.created_at).total_seconds())


def sort_tasks(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=cmp_to_key(compare_tasks))
