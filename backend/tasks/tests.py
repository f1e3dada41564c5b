"""
Unit Tests for Task Tide.

Covers the AI scoring formula, the listing order, suggestions, analytics,
both repositories, the task service and the REST endpoints.
"""

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APITestCase
from rest_framework import status
from datetime import datetime, timedelta, timezone as dt_timezone
import json

from .entities import Task
from .exceptions import TaskNotFound, flatten_errors
from .insights import build_analytics, dominant_category, generate_suggestions
from .repository import (
    DjangoTaskRepository,
    InMemoryTaskRepository,
    TaskFilter,
    reset_task_repositories,
)
from .scoring import (
    AIScorer,
    parse_due_date,
    prioritize_tasks,
    score,
    score_weighted_by_category,
    sort_tasks,
)
from .services import TaskService, next_timestamp


NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)

_counter = 0


def make_task(**overrides) -> Task:
    """Build a task created two days before NOW unless overridden."""
    global _counter
    _counter += 1
    fields = {
        'id': f'task-{_counter}',
        'title': f'Task {_counter}',
        'category': 'personal',
        'priority': 'medium',
        'created_at': NOW - timedelta(days=2),
        'updated_at': NOW - timedelta(days=2),
    }
    fields.update(overrides)
    return Task(**fields)


class ScoreTests(TestCase):
    """Tests for the unweighted AI score."""

    def test_priority_base_scores(self):
        """Base score comes from the priority alone."""
        self.assertEqual(score('high', None, 'Plan week', NOW), 30)
        self.assertEqual(score('medium', None, 'Plan week', NOW), 20)
        self.assertEqual(score('low', None, 'Plan week', NOW), 10)

    def test_unknown_priority_scores_zero_base(self):
        self.assertEqual(score('someday', None, 'Plan week', NOW), 0)

    def test_overdue_and_due_today_same_bonus(self):
        """A task due yesterday and one due today both get +20."""
        yesterday = score('low', NOW - timedelta(days=1), 'Report', NOW)
        today = score('low', NOW + timedelta(hours=2), 'Report', NOW)

        self.assertEqual(yesterday, 30)
        self.assertEqual(today, 30)

    def test_urgency_bucket_boundaries(self):
        """Days until due are rounded up before bucketing."""
        cases = [
            (timedelta(days=1), 20),
            (timedelta(days=1, seconds=1), 15),
            (timedelta(days=3), 15),
            (timedelta(days=3, hours=1), 10),
            (timedelta(days=7), 10),
            (timedelta(days=7, seconds=1), 0),
            (timedelta(days=30), 0),
        ]
        for delta, bonus in cases:
            with self.subTest(delta=delta):
                self.assertEqual(score('low', NOW + delta, 'Report', NOW), 10 + bonus)

    def test_keyword_bonus_case_insensitive(self):
        """Keywords match anywhere in the title regardless of case."""
        self.assertEqual(score('medium', None, 'Urgent: finish report', NOW), 35)
        self.assertEqual(score('medium', None, 'urgent finish report', NOW), 35)
        self.assertEqual(score('medium', None, 'Hit the DEADLINEs', NOW), 35)

    def test_keyword_bonus_does_not_stack(self):
        """Several keywords still add a single +15."""
        self.assertEqual(score('medium', None, 'URGENT critical deadline asap immediately', NOW), 35)

    def test_score_always_in_range(self):
        """Every valid priority/due date/title combination scores 0-100."""
        due_dates = [None, NOW - timedelta(days=10), NOW, NOW + timedelta(days=2),
                     NOW + timedelta(days=5), NOW + timedelta(days=60)]
        titles = ['', 'Walk the dog', 'critical ASAP deadline']
        for priority in ['high', 'medium', 'low']:
            for due_date in due_dates:
                for title in titles:
                    value = score(priority, due_date, title, NOW)
                    self.assertGreaterEqual(value, 0)
                    self.assertLessEqual(value, 100)

    def test_score_is_clamped(self):
        scorer = AIScorer(priority_scores={'high': 90})
        self.assertEqual(scorer.calculate_score('high', NOW, 'urgent', NOW), 100)


class WeightedScoreTests(TestCase):
    """Tests for the category-weighted score used by prioritize."""

    def test_category_weights_applied(self):
        self.assertEqual(score_weighted_by_category('high', NOW, 'urgent', 'work', NOW), 78)
        self.assertEqual(score_weighted_by_category('medium', None, 'Read', 'personal', NOW), 18)
        self.assertEqual(score_weighted_by_category('medium', None, 'Read', 'learning', NOW), 20)

    def test_rounds_half_up(self):
        """45 * 0.9 = 40.5 rounds to 41, 25 * 1.1 rounds to 28."""
        self.assertEqual(score_weighted_by_category('high', None, 'asap', 'personal', NOW), 41)
        self.assertEqual(score_weighted_by_category('low', None, 'asap', 'health', NOW), 28)

    def test_unknown_category_has_neutral_weight(self):
        self.assertEqual(score_weighted_by_category('high', None, 'Read', 'hobby', NOW), 30)
        self.assertEqual(score_weighted_by_category('high', None, 'Read', None, NOW), 30)

    def test_weight_applied_before_clamping(self):
        """120 * 0.9 clamps to 100, not 100 * 0.9."""
        scorer = AIScorer(priority_scores={'high': 100})
        self.assertEqual(scorer.calculate_weighted_score('high', NOW, 'Read', 'personal', NOW), 100)

    def test_unweighted_score_ignores_category(self):
        self.assertEqual(score('high', NOW, 'urgent', NOW), 65)


class PrioritizeTests(TestCase):
    """Tests for bulk prioritization of raw payloads."""

    def test_sorted_descending_by_weighted_score(self):
        tasks = [
            {'title': 'Tidy desk', 'priority': 'low', 'category': 'personal'},
            {'title': 'Ship release ASAP', 'priority': 'high', 'category': 'work',
             'dueDate': (NOW + timedelta(hours=3)).isoformat()},
            {'title': 'Gym', 'priority': 'medium', 'category': 'health'},
        ]

        result = prioritize_tasks(tasks, NOW)

        self.assertEqual([t['title'] for t in result], ['Ship release ASAP', 'Gym', 'Tidy desk'])
        self.assertEqual([t['aiScore'] for t in result], [78, 22, 9])

    def test_incoming_score_replaced_and_fields_kept(self):
        tasks = [{'id': 'a', 'title': 'Read', 'priority': 'low', 'category': 'learning',
                  'aiScore': 99, 'estimate': 2}]

        result = prioritize_tasks(tasks, NOW)

        self.assertEqual(result[0]['aiScore'], 10)
        self.assertEqual(result[0]['id'], 'a')
        self.assertEqual(result[0]['estimate'], 2)
        self.assertEqual(tasks[0]['aiScore'], 99)

    def test_ties_keep_input_order(self):
        tasks = [{'title': f'Same {i}', 'priority': 'low', 'category': 'learning'} for i in range(4)]
        result = prioritize_tasks(tasks, NOW)
        self.assertEqual([t['title'] for t in result], ['Same 0', 'Same 1', 'Same 2', 'Same 3'])

    def test_missing_and_invalid_fields(self):
        """Missing fields score zero; an unparseable due date adds nothing."""
        result = prioritize_tasks([{}, {'title': 'x', 'priority': 'low', 'dueDate': 'not a date'}], NOW)
        self.assertEqual([t['aiScore'] for t in result], [10, 0])

    def test_empty_list(self):
        self.assertEqual(prioritize_tasks([], NOW), [])


class ParseDueDateTests(TestCase):

    def test_bare_date_is_utc_midnight(self):
        self.assertEqual(parse_due_date('2026-03-10'), datetime(2026, 3, 10, tzinfo=dt_timezone.utc))

    def test_datetime_string(self):
        parsed = parse_due_date('2026-03-10T08:30:00Z')
        self.assertEqual(parsed, datetime(2026, 3, 10, 8, 30, tzinfo=dt_timezone.utc))

    def test_invalid_values(self):
        for value in [None, '', 'tomorrow', '2026-02-30', 42]:
            with self.subTest(value=value):
                self.assertIsNone(parse_due_date(value))


class SortOrderTests(TestCase):
    """Tests for the default listing order."""

    def test_incomplete_first_then_score(self):
        """A(open, 50), B(done, 90), C(open, 70) lists as C, A, B."""
        a = make_task(title='A', ai_score=50)
        b = make_task(title='B', ai_score=90, completed=True)
        c = make_task(title='C', ai_score=70)

        self.assertEqual([t.title for t in sort_tasks([a, b, c])], ['C', 'A', 'B'])

    def test_equal_scores_earlier_due_date_first(self):
        later = make_task(title='later', ai_score=40, due_date=NOW + timedelta(days=5))
        sooner = make_task(title='sooner', ai_score=40, due_date=NOW + timedelta(days=1))

        self.assertEqual([t.title for t in sort_tasks([later, sooner])], ['sooner', 'later'])

    def test_no_due_date_newest_first(self):
        old = make_task(title='old', ai_score=20, created_at=NOW - timedelta(days=3))
        new = make_task(title='new', ai_score=20, created_at=NOW - timedelta(hours=1))
        dated = make_task(title='dated', ai_score=20, created_at=NOW - timedelta(days=5),
                          due_date=NOW + timedelta(days=20))

        self.assertEqual([t.title for t in sort_tasks([old, dated, new])], ['new', 'old', 'dated'])


class SuggestionTests(TestCase):
    """Tests for the suggestion generator."""

    def types(self, suggestions):
        return [s.type for s in suggestions]

    def test_empty_collection_no_suggestions(self):
        self.assertEqual(generate_suggestions([], NOW), [])

    def test_overdue_warning(self):
        tasks = [
            make_task(due_date=NOW - timedelta(hours=1)),
            make_task(due_date=NOW - timedelta(days=3), completed=True, completed_at=NOW),
        ]

        suggestions = generate_suggestions(tasks, NOW)

        self.assertEqual(suggestions[0].type, 'warning')
        self.assertEqual(suggestions[0].priority, 'high')
        self.assertIn('1 overdue task(s)', suggestions[0].message)

    def test_high_priority_without_due_date(self):
        tasks = [make_task(priority='high'), make_task(priority='high', completed=True, completed_at=NOW)]

        suggestions = generate_suggestions(tasks, NOW)

        self.assertEqual(suggestions[0].type, 'info')
        self.assertEqual(suggestions[0].priority, 'medium')
        self.assertIn('1 high priority task(s)', suggestions[0].message)

    def test_category_overload_threshold(self):
        """Fires above five open tasks in a category, not at exactly five."""
        done = make_task(completed=True, completed_at=NOW)
        five = [make_task(category='work') for _ in range(5)]
        self.assertNotIn('suggestion', self.types(generate_suggestions(five + [done], NOW)))

        six = five + [make_task(category='work')]
        suggestions = generate_suggestions(six + [done], NOW)
        overload = [s for s in suggestions if s.type == 'suggestion']
        self.assertEqual(len(overload), 1)
        self.assertIn('many work tasks', overload[0].message)
        self.assertEqual(overload[0].priority, 'low')

    def test_completed_tasks_do_not_count_towards_overload(self):
        tasks = [make_task(category='work', completed=True, completed_at=NOW) for _ in range(8)]
        self.assertNotIn('suggestion', self.types(generate_suggestions(tasks, NOW)))

    def test_dominant_category_tie_goes_to_later(self):
        self.assertEqual(dominant_category({'work': 6, 'health': 6}), 'health')
        self.assertEqual(dominant_category({'work': 7, 'health': 6}), 'work')
        self.assertEqual(dominant_category({}), 'personal')

    def test_motivation_when_nothing_completed_today(self):
        tasks = [
            make_task(),
            make_task(completed=True, completed_at=NOW - timedelta(days=1)),
        ]

        suggestions = generate_suggestions(tasks, NOW)

        self.assertEqual(self.types(suggestions), ['motivation'])
        self.assertEqual(suggestions[0].priority, 'medium')

    def test_no_motivation_after_completion_today(self):
        tasks = [make_task(), make_task(completed=True, completed_at=NOW - timedelta(hours=2))]
        self.assertNotIn('motivation', self.types(generate_suggestions(tasks, NOW)))

    def test_completion_day_falls_back_to_created_at(self):
        tasks = [make_task(), make_task(completed=True, created_at=NOW - timedelta(hours=1))]
        self.assertNotIn('motivation', self.types(generate_suggestions(tasks, NOW)))

    def test_no_motivation_without_open_tasks(self):
        tasks = [make_task(completed=True, completed_at=NOW - timedelta(days=4))]
        self.assertEqual(generate_suggestions(tasks, NOW), [])

    def test_workload_warning(self):
        tasks = [make_task(estimate=8.5) for _ in range(5)]

        suggestions = generate_suggestions(tasks, NOW)

        self.assertEqual(suggestions[-1].type, 'warning')
        self.assertIn('42.5 hours', suggestions[-1].message)

    def test_workload_at_threshold_does_not_fire(self):
        tasks = [make_task(estimate=8) for _ in range(5)]
        self.assertEqual(self.types(generate_suggestions(tasks, NOW)), ['motivation'])

    def test_workload_rule_can_be_disabled(self):
        tasks = [make_task(estimate=24) for _ in range(3)]
        self.assertEqual(self.types(generate_suggestions(tasks, NOW, include_workload=False)), ['motivation'])

    def test_fixed_evaluation_order(self):
        tasks = [make_task(category='work', priority='high', estimate=8) for _ in range(6)]
        tasks.append(make_task(due_date=NOW - timedelta(days=1)))

        suggestions = generate_suggestions(tasks, NOW)

        self.assertEqual(
            self.types(suggestions),
            ['warning', 'info', 'suggestion', 'motivation', 'warning']
        )
        self.assertIn('49 hours', suggestions[-1].message)


class AnalyticsTests(TestCase):
    """Tests for the analytics reporter."""

    def test_empty_collection(self):
        report = build_analytics([], NOW)

        self.assertEqual(report.total_tasks, 0)
        self.assertEqual(report.productivity_score, 0)
        self.assertEqual(report.time_blocked, 0)
        self.assertEqual(report.category_stats, {})

    def test_overview_and_breakdowns(self):
        tasks = [
            make_task(category='work', priority='high', completed=True, estimate=2),
            make_task(category='work', priority='low', completed=True, estimate=1.5),
            make_task(category='health', priority='high', estimate=3),
        ]

        data = build_analytics(tasks, NOW).to_dict()

        self.assertEqual(data['overview'], {
            'totalTasks': 3,
            'completedTasks': 2,
            'productivityScore': 67,
            'timeBlocked': 3.5,
        })
        self.assertEqual(data['categoryStats'], {
            'work': {'total': 2, 'completed': 2},
            'health': {'total': 1, 'completed': 0},
        })
        self.assertEqual(data['priorityStats']['high'], {'total': 2, 'completed': 1})
        self.assertEqual(data['generatedAt'], NOW.isoformat())

    def test_productivity_rounds_half_up(self):
        tasks = [make_task(completed=True)] + [make_task() for _ in range(7)]
        self.assertEqual(build_analytics(tasks, NOW).productivity_score, 13)


class TaskFilterTests(TestCase):

    def setUp(self):
        self.repository = InMemoryTaskRepository()
        self.repository.add(make_task(category='work', priority='high'))
        self.repository.add(make_task(category='work', priority='low', completed=True))
        self.repository.add(make_task(category='health', priority='high'))

    def test_all_means_no_filter(self):
        self.assertEqual(len(self.repository.list(TaskFilter(category='all', priority='all'))), 3)

    def test_filters_combine_with_and(self):
        tasks = self.repository.list(TaskFilter(category='work', priority='high'))
        self.assertEqual(len(tasks), 1)

    def test_completed_filter_partitions(self):
        done = self.repository.list(TaskFilter(completed=True))
        pending = self.repository.list(TaskFilter(completed=False))

        self.assertEqual(len(done) + len(pending), 3)
        self.assertFalse({t.id for t in done} & {t.id for t in pending})

    def test_returns_copies(self):
        task = self.repository.list()[0]
        task.title = 'changed'
        self.assertNotEqual(self.repository.get(task.id).title, 'changed')


class DjangoRepositoryTests(TestCase):
    """The ORM repository must behave like the in-memory one."""

    def setUp(self):
        self.repository = DjangoTaskRepository()

    def test_add_get_round_trip(self):
        task = make_task(due_date=NOW, estimate=2.5, ai_score=40)
        self.repository.add(task)

        stored = self.repository.get(task.id)

        self.assertEqual(stored, task)

    def test_filtering(self):
        self.repository.add(make_task(category='work', priority='high'))
        self.repository.add(make_task(category='work', priority='low', completed=True))
        self.repository.add(make_task(category='learning', priority='high'))

        self.assertEqual(len(self.repository.list(TaskFilter(category='work'))), 2)
        self.assertEqual(len(self.repository.list(TaskFilter(category='all', completed=False))), 2)
        self.assertEqual(len(self.repository.list(TaskFilter(priority='high', completed=True))), 0)

    def test_save_and_delete(self):
        task = self.repository.add(make_task())
        task.title = 'Renamed'
        self.repository.save(task)
        self.assertEqual(self.repository.get(task.id).title, 'Renamed')

        deleted = self.repository.delete(task.id)

        self.assertEqual(deleted.title, 'Renamed')
        self.assertIsNone(self.repository.get(task.id))
        self.assertIsNone(self.repository.delete(task.id))


class TaskServiceTests(TestCase):
    """Tests for the task lifecycle rules."""

    def setUp(self):
        self.service = TaskService(InMemoryTaskRepository())
        self.task = self.service.create_task({
            'title': 'Write report',
            'description': '',
            'category': 'work',
            'priority': 'medium',
            'due_date': None,
            'estimate': 1.0,
            'completed': False,
        })

    def test_create_assigns_identity_and_score(self):
        self.assertTrue(self.task.id)
        self.assertEqual(self.task.created_at, self.task.updated_at)
        self.assertEqual(self.task.ai_score, 20)
        self.assertIsNone(self.task.completed_at)

    def test_create_completed_sets_completed_at(self):
        task = self.service.create_task({'title': 'Done', 'category': 'health',
                                         'priority': 'low', 'completed': True})
        self.assertEqual(task.completed_at, task.created_at)

    def test_update_recomputes_score(self):
        updated = self.service.update_task(self.task.id, {'title': 'Write report ASAP', 'priority': 'high'})

        self.assertEqual(updated.ai_score, 45)
        self.assertEqual(updated.created_at, self.task.created_at)
        self.assertGreater(updated.updated_at, self.task.updated_at)
        self.assertEqual(self.service.get_task(self.task.id).ai_score, 45)

    def test_update_completed_sets_completed_at(self):
        updated = self.service.update_task(self.task.id, {'completed': True})
        self.assertIsNotNone(updated.completed_at)

        reopened = self.service.update_task(self.task.id, {'completed': False})
        self.assertIsNone(reopened.completed_at)

    def test_toggle_twice(self):
        """Completion flips back, updated_at increases strictly each time."""
        first = self.service.toggle_task(self.task.id)
        second = self.service.toggle_task(self.task.id)

        self.assertTrue(first.completed)
        self.assertIsNotNone(first.completed_at)
        self.assertFalse(second.completed)
        self.assertIsNone(second.completed_at)
        self.assertGreater(first.updated_at, self.task.updated_at)
        self.assertGreater(second.updated_at, first.updated_at)

    def test_delete_missing_task(self):
        with self.assertRaises(TaskNotFound):
            self.service.delete_task('does-not-exist')
        self.assertEqual(len(self.service.all_tasks()), 1)

    def test_update_missing_task(self):
        with self.assertRaises(TaskNotFound):
            self.service.update_task('does-not-exist', {'title': 'x'})

    def test_next_timestamp_always_moves_forward(self):
        self.assertEqual(next_timestamp(NOW, NOW), NOW + timedelta(microseconds=1))
        self.assertEqual(next_timestamp(NOW, NOW + timedelta(seconds=1)), NOW + timedelta(seconds=1))
        self.assertEqual(next_timestamp(None, NOW), NOW)


class FlattenErrorsTests(TestCase):

    def test_flattens_nested_errors(self):
        errors = {
            'title': ['This field is required.'],
            'tasks': {0: ['Expected a dictionary.']},
            'non_field_errors': ['Invalid data.'],
        }
        self.assertEqual(flatten_errors(errors), [
            'title: This field is required.',
            'tasks.0: Expected a dictionary.',
            'Invalid data.',
        ])


class TaskAPITests(APITestCase):
    """Tests for the task endpoints."""

    def setUp(self):
        reset_task_repositories()

    def post_task(self, **overrides):
        data = {'title': 'Write report', 'category': 'work', 'priority': 'medium'}
        data.update(overrides)
        return self.client.post('/api/tasks', data=json.dumps(data), content_type='application/json')

    def test_create_task(self):
        """POST /api/tasks returns 201 with defaults and a score."""
        response = self.post_task(dueDate='2030-01-15')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Task created successfully')
        task = response.data['data']
        self.assertEqual(task['estimate'], 1.0)
        self.assertFalse(task['completed'])
        self.assertEqual(task['aiScore'], 20)
        self.assertEqual(task['dueDate'], '2030-01-15T00:00:00Z')
        self.assertEqual(task['description'], '')
        for key in ['id', 'createdAt', 'updatedAt', 'completedAt']:
            self.assertIn(key, task)

    def test_create_reports_every_violation(self):
        data = {'title': '', 'category': 'chores', 'estimate': 30}

        response = self.client.post('/api/tasks', data=json.dumps(data), content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'Validation error')
        fields = {detail.split(':')[0] for detail in response.data['details']}
        self.assertEqual(fields, {'title', 'category', 'priority', 'estimate'})

    def test_score_cannot_be_set(self):
        response = self.post_task(aiScore=100, id='mine')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('aiScore: This field is not allowed.', response.data['details'])
        self.assertIn('id: This field is not allowed.', response.data['details'])

    def test_invalid_due_date(self):
        response = self.post_task(dueDate='next tuesday')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('dueDate:'))

    def test_out_of_range_due_date_is_not_stored(self):
        """A due date that cannot be expressed in UTC is rejected before saving."""
        response = self.post_task(dueDate='9999-12-31T23:00:00-05:00')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(response.data['details'][0].startswith('dueDate:'))

        listing = self.client.get('/api/tasks')
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.data['count'], 0)

    def test_title_whitespace_kept(self):
        blank = self.post_task(title='   ')
        padded = self.post_task(title='  padded title  ')

        self.assertEqual(blank.status_code, status.HTTP_201_CREATED)
        self.assertEqual(blank.data['data']['title'], '   ')
        self.assertEqual(padded.status_code, status.HTTP_201_CREATED)
        self.assertEqual(padded.data['data']['title'], '  padded title  ')

    def test_title_must_be_string(self):
        response = self.post_task(title=123)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title: Title must be a string.', response.data['details'])
        self.assertEqual(self.client.get('/api/tasks').data['count'], 0)

    def test_update_title_must_be_string(self):
        task_id = self.post_task().data['data']['id']

        response = self.client.put(
            f'/api/tasks/{task_id}', data=json.dumps({'title': 42}), content_type='application/json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self.client.get(f'/api/tasks/{task_id}').data['data']['title'], 'Write report')

    def test_malformed_json(self):
        response = self.client.post('/api/tasks', data='{"title": ', content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_get_task(self):
        task_id = self.post_task().data['data']['id']

        response = self.client.get(f'/api/tasks/{task_id}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['id'], task_id)

    def test_get_missing_task(self):
        response = self.client.get('/api/tasks/nope')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'success': False, 'error': 'Task not found'})

    def test_list_sorted_and_filtered(self):
        low = self.post_task(title='Low', priority='low').data['data']
        high = self.post_task(title='High', priority='high', category='health').data['data']
        done = self.post_task(title='Done', priority='high', completed=True).data['data']

        response = self.client.get('/api/tasks')
        self.assertEqual(response.data['count'], 3)
        self.assertEqual([t['id'] for t in response.data['data']], [high['id'], low['id'], done['id']])

        response = self.client.get('/api/tasks?category=work&priority=all')
        self.assertEqual([t['id'] for t in response.data['data']], [low['id'], done['id']])

        response = self.client.get('/api/tasks?category=&priority=&completed=')
        self.assertEqual(response.data['count'], 3)

    def test_completed_filter_partitions(self):
        for i in range(3):
            self.post_task(title=f'Open {i}')
        for i in range(2):
            self.post_task(title=f'Done {i}', completed=True)

        done = self.client.get('/api/tasks?completed=true').data['data']
        pending = self.client.get('/api/tasks?completed=false').data['data']

        self.assertEqual(len(done), 2)
        self.assertEqual(len(pending), 3)
        self.assertFalse({t['id'] for t in done} & {t['id'] for t in pending})

    def test_partial_update(self):
        task = self.post_task().data['data']

        response = self.client.put(
            f"/api/tasks/{task['id']}",
            data=json.dumps({'title': 'Write report - urgent'}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Task updated successfully')
        updated = response.data['data']
        self.assertEqual(updated['priority'], 'medium')
        self.assertEqual(updated['estimate'], 1.0)
        self.assertEqual(updated['aiScore'], 35)
        self.assertEqual(updated['createdAt'], task['createdAt'])

    def test_update_validation(self):
        task = self.post_task().data['data']

        response = self.client.put(
            f"/api/tasks/{task['id']}",
            data=json.dumps({'priority': 'extreme', 'estimate': 0.1, 'aiScore': 5}),
            content_type='application/json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(len(response.data['details']), 3)
        current = self.client.get(f"/api/tasks/{task['id']}").data['data']
        self.assertEqual(current, task)

    def test_update_missing_task_checked_first(self):
        response = self.client.put(
            '/api/tasks/nope',
            data=json.dumps({'priority': 'extreme'}),
            content_type='application/json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_task(self):
        task = self.post_task().data['data']

        response = self.client.delete(f"/api/tasks/{task['id']}")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['id'], task['id'])
        self.assertEqual(response.data['message'], 'Task deleted successfully')
        self.assertEqual(self.client.get(f"/api/tasks/{task['id']}").status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_missing_task_leaves_collection(self):
        self.post_task()

        response = self.client.delete('/api/tasks/nope')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/tasks').data['count'], 1)

    def test_toggle(self):
        task = self.post_task().data['data']

        response = self.client.patch(f"/api/tasks/{task['id']}/toggle")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Task marked as completed')
        self.assertTrue(response.data['data']['completed'])
        self.assertIsNotNone(response.data['data']['completedAt'])

        response = self.client.patch(f"/api/tasks/{task['id']}/toggle")
        self.assertEqual(response.data['message'], 'Task marked as incomplete')
        self.assertFalse(response.data['data']['completed'])

    def test_toggle_missing_task(self):
        response = self.client.patch('/api/tasks/nope/toggle')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_method_not_allowed(self):
        response = self.client.post('/api/tasks/nope/toggle')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertFalse(response.data['success'])


class AIAPITests(APITestCase):
    """Tests for the AI endpoints."""

    def setUp(self):
        reset_task_repositories()

    def post_task(self, **data):
        return self.client.post('/api/tasks', data=json.dumps(data), content_type='application/json')

    def test_suggestions_endpoint(self):
        yesterday = (timezone.now() - timedelta(days=1)).isoformat()
        self.post_task(title='Late', category='work', priority='low', dueDate=yesterday)
        self.post_task(title='Big', category='work', priority='high')

        response = self.client.get('/api/ai/suggestions')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['count'], 3)
        self.assertEqual([s['type'] for s in response.data['data']], ['warning', 'info', 'motivation'])
        self.assertEqual(set(response.data['data'][0]), {'type', 'message', 'action', 'priority'})

    def test_analytics_empty(self):
        response = self.client.get('/api/ai/analytics')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['overview']['productivityScore'], 0)
        self.assertEqual(data['categoryStats'], {})
        self.assertIn('generatedAt', data)

    def test_analytics_counts(self):
        self.post_task(title='A', category='work', priority='high', completed=True, estimate=2)
        self.post_task(title='B', category='learning', priority='low')

        overview = self.client.get('/api/ai/analytics').data['data']['overview']

        self.assertEqual(overview, {
            'totalTasks': 2,
            'completedTasks': 1,
            'productivityScore': 50,
            'timeBlocked': 2.0,
        })

    def test_prioritize(self):
        data = {'tasks': [
            {'title': 'Stretch', 'priority': 'low', 'category': 'health'},
            {'title': 'Critical bug', 'priority': 'high', 'category': 'work'},
        ]}

        response = self.client.post('/api/ai/prioritize', data=json.dumps(data), content_type='application/json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Tasks prioritized successfully')
        self.assertEqual([t['title'] for t in response.data['data']], ['Critical bug', 'Stretch'])
        self.assertEqual([t['aiScore'] for t in response.data['data']], [54, 11])

    def test_prioritize_requires_array(self):
        for body in [{'tasks': 'nope'}, {'tasks': {'title': 'x'}}, {}]:
            with self.subTest(body=body):
                response = self.client.post('/api/ai/prioritize', data=json.dumps(body),
                                            content_type='application/json')
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertEqual(response.data['error'], 'Tasks must be an array')

    def test_prioritize_does_not_store(self):
        data = {'tasks': [{'title': 'Temp', 'priority': 'low', 'category': 'work'}]}
        self.client.post('/api/ai/prioritize', data=json.dumps(data), content_type='application/json')
        self.assertEqual(self.client.get('/api/tasks').data['count'], 0)


class InfoAPITests(APITestCase):

    def test_health(self):
        response = self.client.get('/api/health')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'OK')

    def test_api_info_endpoint(self):
        """GET /api/ should return API information."""
        response = self.client.get('/api/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('name', response.data)
        self.assertIn('endpoints', response.data)


@override_settings(TASK_TIDE={'REPOSITORY': 'tasks.repository.DjangoTaskRepository'})
class OrmBackedAPITests(APITestCase):
    """The same REST contract served from the ORM repository."""

    def setUp(self):
        reset_task_repositories()

    def test_crud_cycle(self):
        body = {'title': 'Persist me', 'category': 'learning', 'priority': 'high'}
        created = self.client.post('/api/tasks', data=json.dumps(body), content_type='application/json')
        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        task_id = created.data['data']['id']

        toggled = self.client.patch(f'/api/tasks/{task_id}/toggle')
        self.assertTrue(toggled.data['data']['completed'])

        listed = self.client.get('/api/tasks?completed=true')
        self.assertEqual([t['id'] for t in listed.data['data']], [task_id])

        deleted = self.client.delete(f'/api/tasks/{task_id}')
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get('/api/tasks').data['count'], 0)
