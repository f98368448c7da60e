"""
Tests for categories: per-user name uniqueness, colour validation and the
detach-then-delete rule.
"""

import uuid

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from categories.models import Category
from categories.services import CategoryService
from common.errors import ConflictError, NotFoundError
from tasks.models import Task


class CategoryServiceTests(TestCase):
    """Tests for CategoryService rules."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.service = CategoryService(self.user)

    def test_create_applies_defaults(self):
        category = self.service.create({'name': '  Work  '})

        self.assertEqual(category.name, 'Work')
        self.assertEqual(category.color, '#007AFF')
        self.assertFalse(category.is_favorite)
        self.assertEqual(category.task_count, 0)

    def test_duplicate_name_conflicts(self):
        self.service.create({'name': 'Work'})
        with self.assertRaises(ConflictError):
            self.service.create({'name': 'Work '})

    def test_name_match_is_case_sensitive(self):
        self.service.create({'name': 'Work'})
        category = self.service.create({'name': 'work'})
        self.assertEqual(category.name, 'work')

    def test_rename_to_own_name_is_allowed(self):
        category = self.service.create({'name': 'Work'})
        updated = self.service.update(category.pk, {'name': 'Work', 'isFavorite': True})
        self.assertTrue(updated.is_favorite)

    def test_rename_onto_other_category_conflicts(self):
        self.service.create({'name': 'Work'})
        home = self.service.create({'name': 'Home'})
        with self.assertRaises(ConflictError):
            self.service.update(home.pk, {'name': 'Work'})

    def test_delete_detaches_tasks(self):
        """Deleting a category with N tasks moves all N to no category."""
        category = self.service.create({'name': 'Work'})
        tasks = [
            Task.objects.create(user=self.user, title=f"Task {i}", category=category)
            for i in range(3)
        ]

        moved, message = self.service.delete(category.pk)

        self.assertEqual(moved, 3)
        self.assertEqual(message, 'Category deleted successfully. 3 tasks moved to no category.')
        self.assertFalse(Category.objects.filter(pk=category.pk).exists())
        for task in tasks:
            task.refresh_from_db()
            self.assertIsNone(task.category_id)

    def test_delete_without_tasks_message(self):
        category = self.service.create({'name': 'Empty'})
        moved, message = self.service.delete(category.pk)

        self.assertEqual(moved, 0)
        self.assertEqual(message, 'Category deleted successfully')

    def test_other_users_category_is_not_found(self):
        stranger = User.objects.create_user('stranger@example.com')
        category = CategoryService(stranger).create({'name': 'Private'})

        with self.assertRaises(NotFoundError):
            self.service.get(category.pk)
        with self.assertRaises(NotFoundError):
            self.service.delete(category.pk)
        self.assertTrue(Category.objects.filter(pk=category.pk).exists())


class CategoryEndpointTests(APITestCase):
    """Tests for /api/v1/categories endpoints."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.client.force_authenticate(self.user)

    def test_create_category(self):
        response = self.client.post(
            '/api/v1/categories',
            {'name': 'Work', 'color': '#ff0000', 'isFavorite': True},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['name'], 'Work')
        self.assertEqual(data['color'], '#ff0000')
        self.assertTrue(data['isFavorite'])
        self.assertEqual(data['taskCount'], 0)
        self.assertEqual(data['userId'], str(self.user.pk))

    def test_same_name_is_per_user(self):
        """A second 'Work' conflicts for the same user but not for another user."""
        first = self.client.post('/api/v1/categories', {'name': 'Work'}, format='json')
        second = self.client.post('/api/v1/categories', {'name': 'Work'}, format='json')

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.json()['message'], 'Category with this name already exists')

        other = User.objects.create_user('other@example.com')
        self.client.force_authenticate(other)
        third = self.client.post('/api/v1/categories', {'name': 'Work'}, format='json')
        self.assertEqual(third.status_code, status.HTTP_201_CREATED)

    def test_invalid_color_rejected(self):
        response = self.client.post(
            '/api/v1/categories',
            {'name': 'Work', 'color': 'red'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Invalid category data')
        self.assertIn('color: Invalid color format', response.json()['errors'])

    def test_list_orders_favourites_first(self):
        CategoryService(self.user).create({'name': 'Beta'})
        CategoryService(self.user).create({'name': 'Alpha'})
        CategoryService(self.user).create({'name': 'Zulu', 'isFavorite': True})

        response = self.client.get('/api/v1/categories')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [c['name'] for c in response.json()['data']]
        self.assertEqual(names, ['Zulu', 'Alpha', 'Beta'])
        self.assertNotIn('taskCount', response.json()['data'][0])

    def test_list_with_counts(self):
        category = CategoryService(self.user).create({'name': 'Work'})
        Task.objects.create(user=self.user, title='One', category=category)
        Task.objects.create(user=self.user, title='Two', category=category)

        response = self.client.get('/api/v1/categories', {'includeCounts': 'true'})

        self.assertEqual(response.json()['data'][0]['taskCount'], 2)

    def test_update_category(self):
        category = CategoryService(self.user).create({'name': 'Work'})

        response = self.client.put(
            f'/api/v1/categories/{category.pk}',
            {'description': 'Day job'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], 'Category updated successfully')
        self.assertEqual(response.json()['data']['description'], 'Day job')
        self.assertEqual(response.json()['data']['name'], 'Work')

    def test_delete_reports_moved_tasks(self):
        category = CategoryService(self.user).create({'name': 'Work'})
        task = Task.objects.create(user=self.user, title='One', category=category)

        response = self.client.delete(f'/api/v1/categories/{category.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.json()['message'],
            'Category deleted successfully. 1 tasks moved to no category.'
        )
        detail = self.client.get(f'/api/v1/tasks/{task.pk}')
        self.assertIsNone(detail.json()['data']['categoryId'])

    def test_cross_owner_access_looks_missing(self):
        other = User.objects.create_user('other@example.com')
        category = CategoryService(other).create({'name': 'Private'})

        for method in ('get', 'put', 'delete'):
            response = getattr(self.client, method)(f'/api/v1/categories/{category.pk}', {}, format='json')
            self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(response.json()['message'], 'Category not found')

        missing = self.client.get(f'/api/v1/categories/{uuid.uuid4()}')
        self.assertEqual(missing.json()['message'], 'Category not found')

    def test_malformed_id_is_not_found(self):
        response = self.client.get('/api/v1/categories/not-a-uuid')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['code'], 'NOT_FOUND')
