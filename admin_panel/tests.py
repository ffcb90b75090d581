from datetime import date

from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from internships.lifecycle import complete_internship
from internships.models import Internship
from users.models import Role
from .models import AdminActivity, Notification
from .utils import log_admin_activity

User = get_user_model()


class AdminPanelTestCase(TestCase):
    def setUp(self):
        # Create admin user
        self.admin_user = User.objects.create_superuser(
            email='admin@nexbyte.test',
            password='admin12345'
        )

        # Create intern
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test',
            password='intern12345',
            role=Role.INTERN
        )

        self.client = APIClient()

    def test_dashboard_stats_authenticated(self):
        """Test dashboard stats endpoint with authentication"""
        internship = Internship.objects.create(intern=self.intern, title='QA', start_date=date(2026, 1, 1))
        complete_internship(internship.pk)

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_interns'], 1)
        self.assertEqual(response.data['internships_completed'], 1)
        self.assertEqual(response.data['total_certificates'], 1)
        self.assertEqual(response.data['pending_artifacts'], 0)

    def test_dashboard_stats_unauthenticated(self):
        """Test dashboard stats endpoint without authentication"""
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_stats_forbidden_for_intern(self):
        self.client.force_authenticate(user=self.intern)
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_new_intern_creates_notification(self):
        self.assertTrue(Notification.objects.filter(message__contains='intern@nexbyte.test').exists())

    def test_mark_read(self):
        notification = Notification.objects.create(
            title="Test Notification",
            message="This is a test",
            priority="HIGH"
        )
        self.assertFalse(notification.is_read)

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.post(f'/api/admin-panel/notifications/{notification.id}/mark_read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])

        response = self.client.get('/api/admin-panel/notifications/unread_count/')
        self.assertEqual(response.data['unread'], Notification.objects.filter(is_read=False).count())

    def test_notifications_carry_certificate_id(self):
        internship = Internship.objects.create(intern=self.intern, title='QA', start_date=date(2026, 1, 1))
        certificate = complete_internship(internship.pk).certificate

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.get('/api/admin-panel/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        by_title = {n['title']: n for n in response.data}
        self.assertEqual(by_title['Certificate Issued']['certificate_id'], certificate.certificate_id)
        self.assertIsNone(by_title['New Intern Registration']['certificate_id'])

    def test_activity_accepts_large_object_id(self):
        activity = log_admin_activity(self.admin_user, 'UPDATE', 'Bill', 2 ** 40, "big id")
        activity.refresh_from_db()
        self.assertEqual(activity.object_id, 2 ** 40)

    def test_admin_activity_logging(self):
        """Test admin activity logging"""
        activity = log_admin_activity(self.admin_user, 'CREATE', 'User', self.intern.id, "Created intern")
        self.assertEqual(activity.action, 'CREATE')
        self.assertEqual(activity.admin, self.admin_user)

    def test_activity_not_logged_without_actor(self):
        self.assertIsNone(log_admin_activity(None, 'COMPLETE', 'Internship', 1))
        self.assertFalse(AdminActivity.objects.exists())

    def test_activities_filtered_by_action(self):
        log_admin_activity(self.admin_user, 'CREATE', 'User', 1, "one")
        log_admin_activity(self.admin_user, 'DEACTIVATE', 'User', 1, "two")

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.get('/api/admin-panel/activities/', {'action': 'DEACTIVATE'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([a['description'] for a in response.data], ['two'])
        self.assertEqual(response.data[0]['admin_email'], 'admin@nexbyte.test')


class ExceptionHandlerTestCase(TestCase):
    def test_unhandled_error_is_opaque(self):
        from nexbyte_portal.exceptions import api_exception_handler

        response = api_exception_handler(RuntimeError("connection string leaked"), {"view": None})
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {"error": "Internal server error"})

    def test_api_errors_pass_through(self):
        from rest_framework.exceptions import NotFound
        from nexbyte_portal.exceptions import api_exception_handler

        response = api_exception_handler(NotFound(), {"view": None})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
