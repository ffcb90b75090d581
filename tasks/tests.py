from django.db.models import ProtectedError
from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from clients.models import Client
from users.models import Role
from .models import Project, Task

User = get_user_model()


class TaskTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(email='intern@nexbyte.test', password='intern12345', role=Role.INTERN)
        self.other_intern = User.objects.create_user(email='other@nexbyte.test', password='intern12345', role=Role.INTERN)
        self.acme = Client.objects.create(client_name='Acme', email='billing@acme.test')
        self.project = Project.objects.create(name='Portal rebuild', client=self.acme, total_budget='5000.00')
        self.task = Task.objects.create(
            project=self.project, description='Build login page', assigned_to=self.intern, created_by=self.admin_user
        )
        self.other_task = Task.objects.create(
            project=self.project, description='Write docs', assigned_to=self.other_intern
        )
        self.client = APIClient()

    def test_completed_at_follows_done_status(self):
        self.task.status = Task.Status.DONE
        self.task.save()
        self.assertIsNotNone(self.task.completed_at)

        self.task.status = Task.Status.IN_PROGRESS
        self.task.save()
        self.assertIsNone(self.task.completed_at)

    def test_assignee_cannot_be_deleted(self):
        with self.assertRaises(ProtectedError):
            self.intern.delete()

    def test_admin_creates_task(self):
        self.client.force_authenticate(user=self.admin_user)
        response = self.client.post('/api/tasks/', {
            'project': self.project.id,
            'description': 'Set up CI',
            'assigned_to': self.intern.id,
            'cost': '150.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['created_by'], self.admin_user.id)
        self.assertEqual(response.data['status'], 'todo')

    def test_task_requires_existing_assignee(self):
        self.client.force_authenticate(user=self.admin_user)
        response = self.client.post('/api/tasks/', {
            'project': self.project.id,
            'description': 'Orphan task',
            'assigned_to': 999999,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('assigned_to', response.data)

    def test_intern_lists_only_own_tasks(self):
        self.client.force_authenticate(user=self.intern)
        response = self.client.get('/api/tasks/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['id'] for t in response.data], [self.task.id])

        response = self.client.get('/api/tasks/mine/')
        self.assertEqual([t['id'] for t in response.data], [self.task.id])

    def test_intern_updates_own_task_status(self):
        self.client.force_authenticate(user=self.intern)
        response = self.client.patch(f'/api/tasks/{self.task.id}/status/', {'status': 'done'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'done')
        self.assertIsNotNone(response.data['completed_at'])

    def test_intern_cannot_touch_other_tasks(self):
        self.client.force_authenticate(user=self.intern)
        response = self.client.patch(f'/api/tasks/{self.other_task.id}/status/', {'status': 'done'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.patch(f'/api/tasks/{self.task.id}/', {'description': 'changed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_status_rejected(self):
        self.client.force_authenticate(user=self.intern)
        response = self.client.patch(f'/api/tasks/{self.task.id}/status/', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_projects_are_admin_only(self):
        self.client.force_authenticate(user=self.intern)
        self.assertEqual(self.client.get('/api/projects/').status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.get('/api/projects/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['client_name'], 'Acme')
        self.assertEqual(response.data[0]['task_count'], 2)
