"""
Unit Tests for FocusFlow tasks.

This module covers the task lifecycle rules (backburner dates, completedAt),
the list predicates, pagination and the task endpoints.
"""

import uuid
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone

from django.http import QueryDict
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from categories.models import Category
from common.errors import NotFoundError, ValidationError
from tasks.filters import (
    apply_tag_filter,
    due_on_predicate,
    multi_value,
    ordering_from_params,
    parent_predicate,
    search_predicate,
    status_predicate,
)
from tasks.models import Task
from tasks.services import BACKBURNER_MESSAGE, TaskService


def _utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class PredicateTests(TestCase):
    """Tests for the named query predicates."""

    def setUp(self):
        self.user = User.objects.create_user('filters@example.com')
        self.tasks = Task.objects.filter(user=self.user)

    def make(self, **fields):
        fields.setdefault('title', 'Task')
        return Task.objects.create(user=self.user, **fields)

    def test_multi_value_accepts_repeats_and_commas(self):
        params = QueryDict('status=PENDING,IN_PROGRESS&status=COMPLETED&status=')
        self.assertEqual(multi_value(params, 'status'), ['PENDING', 'IN_PROGRESS', 'COMPLETED'])

    def test_status_predicate_is_or(self):
        pending = self.make(status=Task.Status.PENDING)
        done = self.make(status=Task.Status.COMPLETED, completed_at=timezone.now())
        self.make(status=Task.Status.IN_PROGRESS)

        found = set(self.tasks.filter(status_predicate(['PENDING', 'COMPLETED'])))
        self.assertEqual(found, {pending, done})

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValidationError):
            status_predicate(['DONE'])

    def test_search_matches_title_or_description(self):
        by_title = self.make(title='Write REPORT')
        by_description = self.make(title='Other', description='the quarterly report')
        self.make(title='Unrelated')

        found = set(self.tasks.filter(search_predicate('report')))
        self.assertEqual(found, {by_title, by_description})

    def test_due_on_is_half_open_day(self):
        """dueDate filter covers [day, day + 1)."""
        start = self.make(due_date=_utc(2026, 3, 10, 0, 0))
        late = self.make(due_date=_utc(2026, 3, 10, 23, 59))
        self.make(due_date=_utc(2026, 3, 11, 0, 0))
        self.make(due_date=_utc(2026, 3, 9, 23, 59))

        found = set(self.tasks.filter(due_on_predicate('2026-03-10')))
        self.assertEqual(found, {start, late})

    def test_due_on_rejects_garbage(self):
        with self.assertRaises(ValidationError):
            due_on_predicate('tomorrow-ish')

    def test_parent_null_sentinel_selects_top_level(self):
        parent = self.make(title='Parent')
        child = self.make(title='Child', parent_task=parent)

        self.assertEqual(list(self.tasks.filter(parent_predicate('null'))), [parent])
        self.assertEqual(list(self.tasks.filter(parent_predicate(str(parent.pk)))), [child])

    def test_tag_filter_requires_every_tag(self):
        """Tag filter uses AND semantics."""
        both = self.make(tags=['work', 'urgent', 'q1'])
        self.make(tags=['work'])
        self.make(tags=['urgent'])
        self.make(tags=[])

        found = list(apply_tag_filter(self.tasks, ['work', 'urgent']))
        self.assertEqual(found, [both])

    def test_ordering_allow_list(self):
        self.assertEqual(ordering_from_params(QueryDict('')), ['-created_at', '-id'])
        self.assertEqual(
            ordering_from_params(QueryDict('sortBy=dueDate&sortOrder=asc')),
            ['due_date', 'id']
        )
        with self.assertRaises(ValidationError):
            ordering_from_params(QueryDict('sortBy=password'))
        with self.assertRaises(ValidationError):
            ordering_from_params(QueryDict('sortOrder=sideways'))


class TaskServiceTests(TestCase):
    """Tests for TaskService lifecycle rules."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.service = TaskService(self.user)

    def test_create_defaults(self):
        task = self.service.create({'title': 'Plain'})

        self.assertEqual(task.status, Task.Status.PENDING)
        self.assertEqual(task.priority, Task.Priority.MEDIUM)
        self.assertEqual(task.tags, [])
        self.assertIsNone(task.completed_at)

    def test_create_completed_stamps_completed_at(self):
        task = self.service.create({'title': 'Done', 'status': Task.Status.COMPLETED})
        self.assertIsNotNone(task.completed_at)

    def test_create_backburner_without_dates_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            self.service.create({'title': 'Someday', 'status': Task.Status.BACKBURNER})
        self.assertEqual(ctx.exception.message, BACKBURNER_MESSAGE)
        self.assertFalse(Task.objects.exists())

    def test_create_backburner_with_either_date(self):
        later = timezone.now() + timedelta(days=30)
        by_due = self.service.create({'title': 'A', 'status': 'BACKBURNER', 'dueDate': later})
        by_backburner = self.service.create({'title': 'B', 'status': 'BACKBURNER', 'backburnerDate': later})

        self.assertEqual(by_due.status, Task.Status.BACKBURNER)
        self.assertEqual(by_backburner.status, Task.Status.BACKBURNER)

    def test_update_to_backburner_uses_stored_dates(self):
        """A stored due date satisfies the backburner rule."""
        task = self.service.create({'title': 'Park me', 'dueDate': timezone.now()})
        updated = self.service.update(task.pk, {'status': 'BACKBURNER'})
        self.assertEqual(updated.status, Task.Status.BACKBURNER)

    def test_update_to_backburner_clearing_dates_rejected(self):
        """Explicit nulls in the same update win over stored dates."""
        task = self.service.create({'title': 'Park me', 'dueDate': timezone.now()})
        with self.assertRaises(ValidationError):
            self.service.update(task.pk, {'status': 'BACKBURNER', 'dueDate': None})

    def test_clearing_dates_of_backburner_task_rejected(self):
        later = timezone.now() + timedelta(days=7)
        task = self.service.create({'title': 'Parked', 'status': 'BACKBURNER', 'backburnerDate': later})
        with self.assertRaises(ValidationError):
            self.service.update(task.pk, {'backburnerDate': None})

    def test_completed_at_follows_status(self):
        """completedAt is set exactly while the task is COMPLETED."""
        task = self.service.create({'title': 'Cycle'})

        task = self.service.update(task.pk, {'status': 'COMPLETED'})
        stamp = task.completed_at
        self.assertIsNotNone(stamp)

        task = self.service.update(task.pk, {'status': 'COMPLETED', 'title': 'Cycle again'})
        self.assertEqual(task.completed_at, stamp)

        task = self.service.update(task.pk, {'status': 'IN_PROGRESS'})
        self.assertIsNone(task.completed_at)

    def test_partial_update_leaves_other_fields(self):
        task = self.service.create({
            'title': 'Keep',
            'description': 'notes',
            'priority': 'HIGH',
            'tags': ['a'],
        })
        updated = self.service.update(task.pk, {'description': None})

        self.assertIsNone(updated.description)
        self.assertEqual(updated.title, 'Keep')
        self.assertEqual(updated.priority, Task.Priority.HIGH)
        self.assertEqual(updated.tags, ['a'])

    def test_foreign_category_is_invalid_input(self):
        stranger = User.objects.create_user('stranger@example.com')
        foreign = Category.objects.create(user=stranger, name='Theirs')

        with self.assertRaises(ValidationError) as ctx:
            self.service.create({'title': 'Sneaky', 'categoryId': foreign.pk})
        self.assertEqual(ctx.exception.message, 'Invalid category')

    def test_foreign_parent_is_invalid_input(self):
        stranger = User.objects.create_user('stranger@example.com')
        foreign = Task.objects.create(user=stranger, title='Theirs')

        with self.assertRaises(ValidationError):
            self.service.create({'title': 'Child', 'parentTaskId': foreign.pk})

    def test_cycle_guard(self):
        """A task cannot become its own ancestor."""
        root = self.service.create({'title': 'Root'})
        child = self.service.create({'title': 'Child', 'parentTaskId': root.pk})
        grandchild = self.service.create({'title': 'Grandchild', 'parentTaskId': child.pk})

        with self.assertRaises(ValidationError):
            self.service.update(root.pk, {'parentTaskId': grandchild.pk})
        with self.assertRaises(ValidationError):
            self.service.update(root.pk, {'parentTaskId': root.pk})

        moved = self.service.update(grandchild.pk, {'parentTaskId': None})
        self.assertIsNone(moved.parent_task_id)

    def test_delete_cascades_to_subtasks(self):
        parent = self.service.create({'title': 'Parent'})
        self.service.create({'title': 'Child', 'parentTaskId': parent.pk})

        self.service.delete(parent.pk)
        self.assertFalse(Task.objects.filter(user=self.user).exists())

    def test_delete_other_users_task_not_found(self):
        stranger = User.objects.create_user('stranger@example.com')
        theirs = Task.objects.create(user=stranger, title='Theirs')

        with self.assertRaises(NotFoundError):
            self.service.delete(theirs.pk)
        self.assertTrue(Task.objects.filter(pk=theirs.pk).exists())

    def test_delete_completed_counts_only_owner_completed(self):
        now = timezone.now()
        for _ in range(3):
            Task.objects.create(user=self.user, title='Done', status='COMPLETED', completed_at=now)
        Task.objects.create(user=self.user, title='Open')
        stranger = User.objects.create_user('stranger@example.com')
        Task.objects.create(user=stranger, title='Their done', status='COMPLETED', completed_at=now)

        self.assertEqual(self.service.delete_completed(), 3)
        self.assertEqual(Task.objects.filter(user=self.user).count(), 1)
        self.assertEqual(Task.objects.filter(user=stranger).count(), 1)

    def test_stats(self):
        now = timezone.now()
        Task.objects.create(user=self.user, title='P', due_date=now - timedelta(days=1))
        Task.objects.create(user=self.user, title='I', status='IN_PROGRESS')
        Task.objects.create(
            user=self.user, title='C', status='COMPLETED', completed_at=now,
            due_date=now - timedelta(days=1)
        )
        Task.objects.create(user=self.user, title='B', status='BACKBURNER', backburner_date=now)

        stats = self.service.stats()

        self.assertEqual(stats, {
            'total': 4,
            'pending': 1,
            'inProgress': 1,
            'completed': 1,
            'backburner': 1,
            'overdue': 1,
            'completionRate': 25,
        })

    def test_stats_empty(self):
        self.assertEqual(self.service.stats()['completionRate'], 0)


class TaskEndpointTests(APITestCase):
    """Tests for the /api/v1/tasks endpoints."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.client.force_authenticate(self.user)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.get('/api/v1/tasks')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.json()['success'])

    def test_create_task(self):
        category = Category.objects.create(user=self.user, name='Work')
        response = self.client.post(
            '/api/v1/tasks',
            {
                'title': '  Ship it  ',
                'priority': 'HIGH',
                'categoryId': str(category.pk),
                'tags': ['release'],
                'estimatedHours': 2.5,
                'dueDate': '2026-11-01T09:00:00Z',
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body['message'], 'Task created successfully')
        data = body['data']
        self.assertEqual(data['title'], 'Ship it')
        self.assertEqual(data['status'], 'PENDING')
        self.assertEqual(data['priority'], 'HIGH')
        self.assertEqual(data['estimatedHours'], 2.5)
        self.assertIsNone(data['actualHours'])
        self.assertEqual(data['dueDate'], '2026-11-01T09:00:00Z')
        self.assertEqual(data['categoryId'], str(category.pk))
        self.assertEqual(data['category']['name'], 'Work')
        self.assertEqual(data['subtasks'], [])

    def test_create_backburner_without_dates(self):
        """Backburner task without dates is a 400 naming the rule."""
        response = self.client.post(
            '/api/v1/tasks',
            {'title': 'Someday', 'status': 'BACKBURNER'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['code'], 'VALIDATION_ERROR')
        self.assertIn('backburner date', response.json()['message'])

    def test_repeated_tags_are_dropped(self):
        """Tags keep their first-seen order without duplicates on create and update."""
        response = self.client.post(
            '/api/v1/tasks',
            {'title': 'Tagged', 'tags': ['b', 'a', 'b', 'c', 'a']},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['tags'], ['b', 'a', 'c'])

        task_id = response.json()['data']['id']
        updated = self.client.put(f'/api/v1/tasks/{task_id}', {'tags': ['x', 'x', 'y']}, format='json')

        self.assertEqual(updated.json()['data']['tags'], ['x', 'y'])
        self.assertEqual(Task.objects.get(pk=task_id).tags, ['x', 'y'])

    def test_create_invalid_payload(self):
        response = self.client.post(
            '/api/v1/tasks',
            {'title': '', 'priority': 'URGENT', 'estimatedHours': 1000},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        body = response.json()
        self.assertEqual(body['message'], 'Invalid task data')
        self.assertIn('title: Title is required', body['errors'])
        self.assertTrue(any(e.startswith('priority:') for e in body['errors']))
        self.assertTrue(any(e.startswith('estimatedHours:') for e in body['errors']))

    def test_create_with_foreign_category_is_400(self):
        other = User.objects.create_user('other@example.com')
        foreign = Category.objects.create(user=other, name='Theirs')

        response = self.client.post(
            '/api/v1/tasks',
            {'title': 'Sneaky', 'categoryId': str(foreign.pk)},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Invalid category')

    def test_detail_embeds_subtasks(self):
        parent = Task.objects.create(user=self.user, title='Parent')
        Task.objects.create(user=self.user, title='Child', parent_task=parent)

        response = self.client.get(f'/api/v1/tasks/{parent.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        subtasks = response.json()['data']['subtasks']
        self.assertEqual([s['title'] for s in subtasks], ['Child'])
        self.assertNotIn('subtasks', subtasks[0])

    def test_update_status_round_trip(self):
        task = Task.objects.create(user=self.user, title='Flip')

        done = self.client.put(f'/api/v1/tasks/{task.pk}', {'status': 'COMPLETED'}, format='json')
        self.assertEqual(done.status_code, status.HTTP_200_OK)
        self.assertEqual(done.json()['message'], 'Task updated successfully')
        self.assertIsNotNone(done.json()['data']['completedAt'])

        reopened = self.client.put(f'/api/v1/tasks/{task.pk}', {'status': 'PENDING'}, format='json')
        self.assertIsNone(reopened.json()['data']['completedAt'])

    def test_cross_owner_task_is_not_found(self):
        other = User.objects.create_user('other@example.com')
        theirs = Task.objects.create(user=other, title='Theirs')

        get = self.client.get(f'/api/v1/tasks/{theirs.pk}')
        put = self.client.put(f'/api/v1/tasks/{theirs.pk}', {'title': 'Mine now'}, format='json')
        delete = self.client.delete(f'/api/v1/tasks/{theirs.pk}')
        missing = self.client.get(f'/api/v1/tasks/{uuid.uuid4()}')

        for response in (get, put, delete, missing):
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response.json()['message'], 'Task not found')

        theirs.refresh_from_db()
        self.assertEqual(theirs.title, 'Theirs')

    def test_delete_task(self):
        task = Task.objects.create(user=self.user, title='Bye')
        response = self.client.delete(f'/api/v1/tasks/{task.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], 'Task deleted successfully')
        self.assertFalse(Task.objects.filter(pk=task.pk).exists())

    def test_pagination(self):
        """120 tasks at limit 50 make three pages."""
        Task.objects.bulk_create([
            Task(user=self.user, title=f"Task {i}") for i in range(120)
        ])

        first = self.client.get('/api/v1/tasks', {'page': 1, 'limit': 50}).json()['data']
        self.assertEqual(len(first['data']), 50)
        self.assertEqual(first['pagination'], {
            'page': 1,
            'limit': 50,
            'total': 120,
            'totalPages': 3,
            'hasNext': True,
            'hasPrev': False,
        })

        last = self.client.get('/api/v1/tasks', {'page': 3, 'limit': 50}).json()['data']
        self.assertEqual(len(last['data']), 20)
        self.assertFalse(last['pagination']['hasNext'])
        self.assertTrue(last['pagination']['hasPrev'])

    def test_limit_is_clamped(self):
        Task.objects.create(user=self.user, title='Only')

        pagination = self.client.get('/api/v1/tasks', {'limit': 1000, 'page': 0}).json()['data']['pagination']
        self.assertEqual(pagination['limit'], 100)
        self.assertEqual(pagination['page'], 1)

    def test_list_only_shows_own_tasks(self):
        other = User.objects.create_user('other@example.com')
        Task.objects.create(user=other, title='Theirs')
        Task.objects.create(user=self.user, title='Mine')

        titles = [t['title'] for t in self.client.get('/api/v1/tasks').json()['data']['data']]
        self.assertEqual(titles, ['Mine'])

    def test_list_filters_combine(self):
        Task.objects.create(user=self.user, title='Match', priority='HIGH', tags=['a', 'b'])
        Task.objects.create(user=self.user, title='Wrong priority', priority='LOW', tags=['a', 'b'])
        Task.objects.create(user=self.user, title='Missing tag', priority='HIGH', tags=['a'])

        response = self.client.get('/api/v1/tasks', {'priority': 'HIGH,CRITICAL', 'tags': ['a', 'b']})

        titles = [t['title'] for t in response.json()['data']['data']]
        self.assertEqual(titles, ['Match'])

    def test_list_sort(self):
        Task.objects.create(user=self.user, title='b')
        Task.objects.create(user=self.user, title='a')
        Task.objects.create(user=self.user, title='c')

        response = self.client.get('/api/v1/tasks', {'sortBy': 'title', 'sortOrder': 'asc'})
        titles = [t['title'] for t in response.json()['data']['data']]
        self.assertEqual(titles, ['a', 'b', 'c'])

    def test_list_unknown_sort_field(self):
        response = self.client.get('/api/v1/tasks', {'sortBy': 'user__password'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stats_endpoint(self):
        Task.objects.create(user=self.user, title='Done', status='COMPLETED', completed_at=timezone.now())
        Task.objects.create(user=self.user, title='Open')

        response = self.client.get('/api/v1/tasks/stats')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['completionRate'], 50)

    def test_bulk_delete_completed(self):
        Task.objects.create(user=self.user, title='Done 1', status='COMPLETED', completed_at=timezone.now())
        Task.objects.create(user=self.user, title='Done 2', status='COMPLETED', completed_at=timezone.now())
        Task.objects.create(user=self.user, title='Open')

        response = self.client.delete('/api/v1/tasks/completed/bulk')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], '2 completed tasks deleted')
        self.assertEqual(Task.objects.filter(user=self.user).count(), 1)

    def test_method_not_allowed(self):
        response = self.client.patch('/api/v1/tasks/stats', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.json()['code'], 'METHOD_NOT_ALLOWED')
