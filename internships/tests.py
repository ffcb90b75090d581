from datetime import date, timedelta

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status
from admin_panel.models import AdminActivity
from certificates.models import Certificate
from users.models import Role, InternshipStatus
from .lifecycle import (
    InvalidTransition, complete_internship, complete_due_internships, start_internship,
    internships_nearing_completion,
)
from .models import Internship

User = get_user_model()


class InternshipLifecycleTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test', password='intern12345', name='Ada Intern', role=Role.INTERN
        )
        self.internship = Internship.objects.create(
            intern=self.intern,
            title='Backend Engineering',
            start_date=date(2026, 1, 5),
            end_date=date(2026, 4, 5),
        )

    def test_complete_issues_single_certificate(self):
        result = complete_internship(self.internship.pk, actor=self.admin_user)

        self.assertTrue(result.created)
        self.assertEqual(result.internship.status, Internship.Status.COMPLETED)
        self.assertEqual(result.internship.progress, 100)
        self.assertIsNotNone(result.internship.completed_at)
        self.assertTrue(result.certificate.certificate_id.startswith('NEX-'))
        self.assertEqual(result.certificate.intern_name, 'Ada Intern')
        self.assertEqual(Certificate.objects.filter(internship=self.internship).count(), 1)

    def test_complete_twice_returns_same_certificate(self):
        first = complete_internship(self.internship.pk, actor=self.admin_user)
        second = complete_internship(self.internship.pk, actor=self.admin_user)

        self.assertFalse(second.created)
        self.assertEqual(first.certificate.pk, second.certificate.pk)
        self.assertEqual(first.certificate.certificate_id, second.certificate.certificate_id)
        self.assertEqual(Certificate.objects.count(), 1)
        # only the winning call is audited
        self.assertEqual(AdminActivity.objects.filter(action='COMPLETE').count(), 1)

    def test_complete_links_certificate_to_intern(self):
        self.intern.current_internship = self.internship
        self.intern.save()

        result = complete_internship(self.internship.pk)

        self.intern.refresh_from_db()
        self.assertEqual(self.intern.internship_status, InternshipStatus.COMPLETED)
        self.assertEqual(self.intern.latest_certificate_id, result.certificate.pk)
        self.assertIsNone(self.intern.current_internship_id)

    def test_complete_unknown_internship(self):
        with self.assertRaises(Internship.DoesNotExist):
            complete_internship(999999)

    def test_open_ended_internship_gets_end_date(self):
        self.internship.end_date = None
        self.internship.save()

        result = complete_internship(self.internship.pk)

        self.assertEqual(result.internship.end_date, timezone.localdate())
        self.assertEqual(result.certificate.end_date, timezone.localdate())

    def test_start_moves_forward_only(self):
        internship = start_internship(self.internship, actor=self.admin_user)
        self.assertEqual(internship.status, Internship.Status.IN_PROGRESS)

        with self.assertRaises(InvalidTransition):
            start_internship(internship)

        complete_internship(internship.pk)
        internship.refresh_from_db()
        with self.assertRaises(InvalidTransition):
            start_internship(internship)

    def test_one_active_internship_per_intern(self):
        with self.assertRaises(IntegrityError), transaction.atomic():
            Internship.objects.create(intern=self.intern, title='Second', start_date=date(2026, 2, 1))

    def test_new_internship_allowed_after_completion(self):
        complete_internship(self.internship.pk)
        second = Internship.objects.create(intern=self.intern, title='Second', start_date=date(2026, 5, 1))
        result = complete_internship(second.pk)
        self.assertTrue(result.created)
        self.assertEqual(Certificate.objects.filter(intern=self.intern).count(), 2)

    def test_complete_due_internships(self):
        self.internship.end_date = timezone.localdate() - timedelta(days=1)
        self.internship.save()
        start_internship(self.internship)

        results = complete_due_internships()

        self.assertEqual([r.internship.pk for r in results], [self.internship.pk])
        self.internship.refresh_from_db()
        self.assertTrue(self.internship.is_completed)
        self.assertEqual(complete_due_internships(), [])

    def test_completed_without_certificate_is_healed(self):
        Internship.objects.filter(pk=self.internship.pk).update(status=Internship.Status.COMPLETED)

        results = complete_due_internships()

        self.assertEqual(len(results), 1)
        self.assertTrue(Certificate.objects.filter(internship=self.internship).exists())

    def test_pending_internship_is_not_auto_completed(self):
        self.internship.end_date = timezone.localdate() - timedelta(days=1)
        self.internship.save()

        self.assertEqual(complete_due_internships(), [])
        self.assertEqual(internships_nearing_completion(), [])
        self.internship.refresh_from_db()
        self.assertEqual(self.internship.status, Internship.Status.PENDING)
        self.assertFalse(Certificate.objects.exists())

    def test_nearing_completion_lists_in_progress_only(self):
        self.internship.end_date = timezone.localdate() + timedelta(days=3)
        self.internship.save()
        self.assertEqual(internships_nearing_completion(), [])

        start_internship(self.internship)
        nearing = internships_nearing_completion()
        self.assertEqual([(i.pk, days) for i, days in nearing], [(self.internship.pk, 3)])

    def test_repeat_completion_keeps_newer_owner_state(self):
        first = complete_internship(self.internship.pk)
        second_internship = Internship.objects.create(intern=self.intern, title='Second', start_date=date(2026, 5, 1))
        second = complete_internship(second_internship.pk)
        third = Internship.objects.create(intern=self.intern, title='Third', start_date=date(2026, 9, 1))
        start_internship(third)

        self.intern.refresh_from_db()
        before = (self.intern.internship_status, self.intern.latest_certificate_id)
        self.assertEqual(before, (InternshipStatus.IN_PROGRESS, second.certificate.pk))

        again = complete_internship(self.internship.pk)

        self.assertFalse(again.created)
        self.assertEqual(again.certificate.pk, first.certificate.pk)
        self.intern.refresh_from_db()
        self.assertEqual((self.intern.internship_status, self.intern.latest_certificate_id), before)
        self.assertEqual(self.intern.current_internship_id, third.pk)

    def test_management_command(self):
        self.internship.end_date = timezone.localdate() - timedelta(days=2)
        self.internship.save()
        start_internship(self.internship)

        call_command('complete_due_internships', verbosity=0)

        self.assertTrue(Certificate.objects.filter(internship=self.internship).exists())


class InternshipAPITestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test', password='intern12345', name='Ada Intern', role=Role.INTERN
        )
        self.member = User.objects.create_user(email='member@nexbyte.test', password='member12345')
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin_user)

    def create_internship(self, **kwargs):
        data = {'intern': self.intern.id, 'title': 'Data Science', 'start_date': '2026-01-01', 'end_date': '2026-03-01'}
        data.update(kwargs)
        return self.client.post('/api/internships/', data, format='json')

    def test_create_internship_links_intern(self):
        response = self.create_internship()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'pending')

        self.intern.refresh_from_db()
        self.assertEqual(self.intern.current_internship_id, response.data['id'])
        self.assertEqual(self.intern.internship_start_date, date(2026, 1, 1))

    def test_create_second_active_internship_rejected(self):
        self.create_internship()
        response = self.create_internship(title='Another')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('intern', response.data)

    def test_internship_for_non_intern_rejected(self):
        response = self.create_internship(intern=self.member.id)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_status_cannot_be_set_directly(self):
        internship_id = self.create_internship().data['id']
        response = self.client.patch(f'/api/internships/{internship_id}/', {'status': 'completed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Internship.objects.get(pk=internship_id).status, Internship.Status.PENDING)

    def test_internships_cannot_be_deleted(self):
        internship_id = self.create_internship().data['id']
        response = self.client.delete(f'/api/internships/{internship_id}/')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_start_action(self):
        internship_id = self.create_internship().data['id']
        response = self.client.post(f'/api/internships/{internship_id}/start/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'in_progress')

        response = self.client.post(f'/api/internships/{internship_id}/start/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_complete_endpoint_is_idempotent(self):
        internship_id = self.create_internship().data['id']
        url = f'/api/internship-management/complete/{internship_id}/'

        first = self.client.put(url)
        second = self.client.post(url)

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertTrue(first.data['created'])
        self.assertFalse(second.data['created'])
        self.assertEqual(
            first.data['certificate']['certificate_id'],
            second.data['certificate']['certificate_id'],
        )
        self.assertEqual(first.data['internship']['status'], 'completed')
        self.assertIn('/api/certificates/verify/', first.data['certificate']['verification_url'])

    def test_complete_unknown_internship_is_404(self):
        response = self.client.put('/api/internship-management/complete/424242/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Internship not found'})

    def test_complete_manual_by_intern(self):
        self.create_internship()
        response = self.client.post(f'/api/internship-management/complete-manual/{self.intern.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['created'])

        response = self.client.post(f'/api/internship-management/complete-manual/{self.intern.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['created'])

    def test_complete_manual_without_internship(self):
        response = self.client.post(f'/api/internship-management/complete-manual/{self.intern.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_progress_to_100_completes(self):
        internship_id = self.create_internship().data['id']
        url = f'/api/internship-management/progress/{internship_id}/'

        response = self.client.put(url, {'progress': 40, 'notes': 'Halfway there'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['internship']['progress'], 40)
        self.assertNotIn('certificate', response.data)

        response = self.client.put(url, {'progress': 100}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['internship']['status'], 'completed')
        self.assertIn('certificate_id', response.data['certificate'])

    def test_progress_out_of_range(self):
        internship_id = self.create_internship().data['id']
        response = self.client.put(
            f'/api/internship-management/progress/{internship_id}/', {'progress': 120}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_check_completions(self):
        yesterday = (timezone.localdate() - timedelta(days=1)).isoformat()
        internship_id = self.create_internship(start_date='2026-01-01', end_date=yesterday).data['id']
        self.client.post(f'/api/internships/{internship_id}/start/')

        response = self.client.post('/api/internship-management/check-completions/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['completed']), 1)
        self.assertTrue(response.data['completed'][0]['created'])
        self.assertIn('timestamp', response.data)

    def test_intern_sees_own_internship(self):
        self.create_internship()
        client = APIClient()
        client.force_authenticate(user=self.intern)

        response = client.get('/api/internship-management/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['internship']['title'], 'Data Science')
        self.assertIsNone(response.data['certificate'])

    def test_management_endpoints_require_admin(self):
        internship_id = self.create_internship().data['id']
        client = APIClient()
        client.force_authenticate(user=self.intern)

        self.assertEqual(
            client.put(f'/api/internship-management/complete/{internship_id}/').status_code,
            status.HTTP_403_FORBIDDEN,
        )
        self.assertEqual(client.get('/api/internships/').status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Certificate.objects.exists())

    def test_unauthenticated_is_rejected(self):
        client = APIClient()
        response = client.post('/api/internship-management/check-completions/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_filter_by_status(self):
        self.create_internship()
        response = self.client.get('/api/internships/', {'status': 'completed'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
