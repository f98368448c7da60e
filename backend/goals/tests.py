"""
Tests for goals: auto-completion, parent ownership, subgoal embedding and
statistics.
"""

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from common.errors import NotFoundError, ValidationError
from goals.models import Goal
from goals.services import GoalService


class GoalServiceTests(TestCase):
    """Tests for GoalService rules."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.service = GoalService(self.user)

    def test_create_defaults(self):
        goal = self.service.create({'title': 'Run a marathon'})

        self.assertEqual(goal.category, Goal.Category.OTHER)
        self.assertEqual(goal.progress_percentage, 0)
        self.assertFalse(goal.is_completed)

    def test_progress_100_completes_goal(self):
        goal = self.service.create({'title': 'Read 12 books'})
        updated = self.service.update(goal.pk, {'progressPercentage': 100})
        self.assertTrue(updated.is_completed)

    def test_explicit_incomplete_wins(self):
        """isCompleted=false in the same update keeps the goal open."""
        goal = self.service.create({'title': 'Save money'})
        updated = self.service.update(goal.pk, {'progressPercentage': 100, 'isCompleted': False})
        self.assertFalse(updated.is_completed)

    def test_partial_progress_does_not_complete(self):
        goal = self.service.create({'title': 'Learn Spanish'})
        updated = self.service.update(goal.pk, {'progressPercentage': 99})
        self.assertFalse(updated.is_completed)

    def test_foreign_parent_rejected(self):
        stranger = User.objects.create_user('stranger@example.com')
        theirs = GoalService(stranger).create({'title': 'Theirs'})

        with self.assertRaises(ValidationError) as ctx:
            self.service.create({'title': 'Child', 'parentGoalId': theirs.pk})
        self.assertEqual(ctx.exception.message, 'Invalid parent goal')

    def test_cycle_guard(self):
        root = self.service.create({'title': 'Root'})
        child = self.service.create({'title': 'Child', 'parentGoalId': root.pk})

        with self.assertRaises(ValidationError):
            self.service.update(root.pk, {'parentGoalId': child.pk})

    def test_delete_cascades(self):
        root = self.service.create({'title': 'Root'})
        child = self.service.create({'title': 'Child', 'parentGoalId': root.pk})
        self.service.create({'title': 'Grandchild', 'parentGoalId': child.pk})

        self.service.delete(root.pk)
        self.assertFalse(Goal.objects.exists())

    def test_other_users_goal_not_found(self):
        stranger = User.objects.create_user('stranger@example.com')
        theirs = GoalService(stranger).create({'title': 'Theirs'})

        with self.assertRaises(NotFoundError):
            self.service.update(theirs.pk, {'title': 'Mine'})

    def test_stats(self):
        Goal.objects.create(user=self.user, title='Done', progress_percentage=100, is_completed=True)
        Goal.objects.create(user=self.user, title='Half', progress_percentage=50)
        Goal.objects.create(user=self.user, title='Quarter', progress_percentage=25)

        stats = self.service.stats()

        # averageProgress only counts incomplete goals: (50 + 25) / 2 = 37.5
        self.assertEqual(stats, {
            'total': 3,
            'completed': 1,
            'inProgress': 2,
            'averageProgress': 38,
            'completionRate': 33,
        })

    def test_stats_empty(self):
        self.assertEqual(self.service.stats(), {
            'total': 0,
            'completed': 0,
            'inProgress': 0,
            'averageProgress': 0,
            'completionRate': 0,
        })


class GoalEndpointTests(APITestCase):
    """Tests for the /api/v1/goals endpoints."""

    def setUp(self):
        self.user = User.objects.create_user('owner@example.com')
        self.client.force_authenticate(self.user)

    def test_create_goal(self):
        response = self.client.post(
            '/api/v1/goals',
            {'title': 'Get fit', 'category': 'HEALTH', 'targetDate': '2026-12-31T00:00:00Z'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['category'], 'HEALTH')
        self.assertEqual(data['progressPercentage'], 0)
        self.assertFalse(data['isCompleted'])
        self.assertEqual(data['subgoals'], [])

    def test_invalid_goal_category(self):
        response = self.client.post('/api/v1/goals', {'title': 'x', 'category': 'FUN'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], 'Invalid goal data')

    def test_progress_out_of_range(self):
        goal = Goal.objects.create(user=self.user, title='Bounded')
        response = self.client.put(f'/api/v1/goals/{goal.pk}', {'progressPercentage': 101}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_progress_to_100(self):
        goal = Goal.objects.create(user=self.user, title='Finish')

        response = self.client.put(f'/api/v1/goals/{goal.pk}', {'progressPercentage': 100}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], 'Goal updated successfully')
        self.assertTrue(response.json()['data']['isCompleted'])

    def test_two_levels_of_subgoals_embedded(self):
        root = Goal.objects.create(user=self.user, title='Root')
        child = Goal.objects.create(user=self.user, title='Child', parent_goal=root)
        Goal.objects.create(user=self.user, title='Grandchild', parent_goal=child)

        data = self.client.get(f'/api/v1/goals/{root.pk}').json()['data']

        self.assertEqual(data['subgoals'][0]['title'], 'Child')
        self.assertEqual(data['subgoals'][0]['subgoals'][0]['title'], 'Grandchild')
        self.assertNotIn('subgoals', data['subgoals'][0]['subgoals'][0])

    def test_list_filters(self):
        root = Goal.objects.create(user=self.user, title='Root', category='LEARNING')
        Goal.objects.create(user=self.user, title='Child', parent_goal=root, category='LEARNING')
        Goal.objects.create(user=self.user, title='Done', is_completed=True, progress_percentage=100)

        top_level = self.client.get('/api/v1/goals', {'parentGoalId': 'null'}).json()['data']
        self.assertEqual({g['title'] for g in top_level}, {'Root', 'Done'})

        learning = self.client.get('/api/v1/goals', {'category': 'LEARNING'}).json()['data']
        self.assertEqual({g['title'] for g in learning}, {'Root', 'Child'})

        open_goals = self.client.get('/api/v1/goals', {'isCompleted': 'false'}).json()['data']
        self.assertEqual({g['title'] for g in open_goals}, {'Root', 'Child'})

        children = self.client.get('/api/v1/goals', {'parentGoalId': str(root.pk)}).json()['data']
        self.assertEqual([g['title'] for g in children], ['Child'])

    def test_stats_endpoint(self):
        Goal.objects.create(user=self.user, title='Done', progress_percentage=100, is_completed=True)
        Goal.objects.create(user=self.user, title='Open', progress_percentage=40)

        response = self.client.get('/api/v1/goals/stats')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['averageProgress'], 40)
        self.assertEqual(response.json()['data']['completionRate'], 50)

    def test_cross_owner_goal_is_not_found(self):
        other = User.objects.create_user('other@example.com')
        theirs = Goal.objects.create(user=other, title='Theirs')

        response = self.client.delete(f'/api/v1/goals/{theirs.pk}')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json()['message'], 'Goal not found')
        self.assertTrue(Goal.objects.filter(pk=theirs.pk).exists())

    def test_delete_goal(self):
        goal = Goal.objects.create(user=self.user, title='Bye')
        response = self.client.delete(f'/api/v1/goals/{goal.pk}')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], 'Goal deleted successfully')
