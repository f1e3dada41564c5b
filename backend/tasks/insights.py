"""
Suggestions and productivity analytics for Task Tide.

Both reports are pure functions over the full task collection. ``now`` is
always passed in explicitly so the results are reproducible.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List

from django.utils import timezone

from .entities import Task, DEFAULT_ESTIMATE_HOURS
from .scoring import round_half_up


CATEGORY_OVERLOAD_THRESHOLD = 5
WORKLOAD_HOURS_THRESHOLD = 40
DEFAULT_DOMINANT_CATEGORY = 'personal'


@dataclass
class Suggestion:
    """A human-readable nudge derived from aggregate task state."""
    type: str
    message: str
    action: str
    priority: str


def _estimate(task: Task) -> float:
    return task.estimate or DEFAULT_ESTIMATE_HOURS


def _format_hours(hours: float) -> str:
    return f"{hours:g}"


def dominant_category(counts: Dict[str, int]) -> str:
    """
    Pick the category with the most open tasks.

    Folds over the categories in first-encounter order starting from
    'personal'; the accumulator is kept only when strictly greater, so the
    later of two tied categories wins.
    """
    best = DEFAULT_DOMINANT_CATEGORY
    for category in counts:
        if counts.get(best, 0) > counts[category]:
            continue
        best = category
    return best


def generate_suggestions(
    tasks: Iterable[Task],
    now: datetime,
    include_workload: bool = True
) -> List[Suggestion]:
    """
    Build suggestions in a fixed order; every rule is independent.

    Args:
        tasks: The full task collection
        now: Reference time for "overdue" and "today"
        include_workload: Whether to evaluate the total-workload rule
    """
    tasks = list(tasks)
    open_tasks = [t for t in tasks if not t.completed]
    suggestions = []

    overdue = [t for t in open_tasks if t.due_date and t.due_date < now]
    if overdue:
        suggestions.append(Suggestion(
            type='warning',
            message=f"You have {len(overdue)} overdue task(s). Consider rescheduling or completing them soon.",
            action='View overdue tasks',
            priority='high'
        ))

    high_no_due = [t for t in open_tasks if t.priority == 'high' and not t.due_date]
    if high_no_due:
        suggestions.append(Suggestion(
            type='info',
            message=f"You have {len(high_no_due)} high priority task(s) without due dates. Consider setting deadlines.",
            action='Set due dates',
            priority='medium'
        ))

    # Counter keeps first-encounter order
    category_counts = Counter(t.category for t in open_tasks)
    busiest = dominant_category(category_counts)
    if category_counts.get(busiest, 0) > CATEGORY_OVERLOAD_THRESHOLD:
        suggestions.append(Suggestion(
            type='suggestion',
            message=f"You have many {busiest} tasks. Consider breaking them into smaller, manageable pieces.",
            action='Break down tasks',
            priority='low'
        ))

    today = timezone.localtime(now).date()
    completed_today = [
        t for t in tasks
        if t.completed and timezone.localtime(t.completed_at or t.created_at).date() == today
    ]
    if not completed_today and open_tasks:
        suggestions.append(Suggestion(
            type='motivation',
            message="Start your day with a quick win! Complete a small task to build momentum.",
            action='Find quick tasks',
            priority='medium'
        ))

    if include_workload:
        total_hours = sum(_estimate(t) for t in open_tasks)
        if total_hours > WORKLOAD_HOURS_THRESHOLD:
            suggestions.append(Suggestion(
                type='warning',
                message=(
                    f"You have {_format_hours(total_hours)} hours of estimated work. "
                    "Consider prioritizing or delegating some tasks."
                ),
                action='Review workload',
                priority='high'
            ))

    return suggestions


@dataclass
class AnalyticsReport:
    """Productivity overview plus per-category and per-priority breakdowns."""
    total_tasks: int
    completed_tasks: int
    productivity_score: int
    time_blocked: float
    category_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)
    priority_stats: Dict[str, Dict[str, int]] = field(default_factory=dict)
    generated_at: datetime = None

    def to_dict(self) -> Dict:
        return {
            'overview': {
                'totalTasks': self.total_tasks,
                'completedTasks': self.completed_tasks,
                'productivityScore': self.productivity_score,
                'timeBlocked': self.time_blocked
            },
            'categoryStats': self.category_stats,
            'priorityStats': self.priority_stats,
            'generatedAt': self.generated_at.isoformat() if self.generated_at else None
        }


def _breakdown(tasks: List[Task], attribute: str) -> Dict[str, Dict[str, int]]:
    stats: Dict[str, Dict[str, int]] = {}
    for task in tasks:
        bucket = stats.setdefault(getattr(task, attribute), {'total': 0, 'completed': 0})
        bucket['total'] += 1
        if task.completed:
            bucket['completed'] += 1
    return stats


def build_analytics(tasks: Iterable[Task], now: datetime) -> AnalyticsReport:
    tasks = list(tasks)
    total = len(tasks)
    completed = [t for t in tasks if t.completed]
    productivity = round_half_up(len(completed) / total * 100) if total else 0

    return AnalyticsReport(
        total_tasks=total,
        completed_tasks=len(completed),
        productivity_score=productivity,
        time_blocked=sum(_estimate(t) for t in completed),
        category_stats=_breakdown(tasks, 'category'),
        priority_stats=_breakdown(tasks, 'priority'),
        generated_at=now
    )
