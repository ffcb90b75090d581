from datetime import date
from unittest import mock

import requests
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from admin_panel.models import Notification
from internships.lifecycle import complete_internship
from internships.models import Internship
from users.models import Role
from .models import Certificate
from .storage import upload_artifact, sign_upload_params, retry_pending_artifacts
from .utils import generate_certificate_id, render_certificate_image

User = get_user_model()

CLOUDINARY = {
    'CLOUDINARY_CLOUD_NAME': 'nexbyte',
    'CLOUDINARY_API_KEY': 'key',
    'CLOUDINARY_API_SECRET': 'secret',
}


def cloudinary_response(url='https://res.cloudinary.com/nexbyte/image/upload/cert.png'):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {'secure_url': url}
    return response


class CertificateTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test', password='intern12345', name='Ada Intern', role=Role.INTERN
        )
        self.internship = Internship.objects.create(
            intern=self.intern,
            title='Frontend Engineering',
            start_date=date(2026, 1, 5),
            end_date=date(2026, 4, 5),
        )
        self.client = APIClient()

    def issue(self):
        return complete_internship(self.internship.pk).certificate


class CertificateIssuanceTests(CertificateTestCase):
    def test_certificate_id_format(self):
        certificate = self.issue()
        prefix, stamp, suffix = certificate.certificate_id.split('-')
        self.assertEqual(prefix, 'NEX')
        self.assertTrue(stamp.isalnum())
        self.assertEqual(len(suffix), 6)
        self.assertEqual(certificate.certificate_url, f'http://localhost:3000/certificate/{certificate.certificate_id}')

    def test_ids_differ_for_same_inputs(self):
        certificate = self.issue()
        ids = {generate_certificate_id(self.internship.pk, certificate.issued_at) for _ in range(20)}
        self.assertEqual(len(ids), 20)

    def test_snapshot_and_signature(self):
        certificate = self.issue()
        self.assertEqual(certificate.internship_title, 'Frontend Engineering')
        self.assertEqual(certificate.start_date, date(2026, 1, 5))
        self.assertTrue(Certificate.objects.get(pk=certificate.pk).has_valid_signature())

    def test_tampered_snapshot_fails_signature(self):
        certificate = self.issue()
        Certificate.objects.filter(pk=certificate.pk).update(intern_name='Mallory')
        self.assertFalse(Certificate.objects.get(pk=certificate.pk).has_valid_signature())

    def test_id_collision_is_retried(self):
        other_intern = User.objects.create_user(email='other@nexbyte.test', password='x' * 10, role=Role.INTERN)
        other = Internship.objects.create(intern=other_intern, title='Other', start_date=date(2026, 1, 1))
        taken = complete_internship(other.pk).certificate.certificate_id

        with mock.patch(
            'certificates.models.generate_certificate_id', side_effect=[taken, 'NEX-FRESH-ABC123']
        ):
            certificate, created = Certificate.issue(Internship.objects.get(pk=self.internship.pk))

        self.assertTrue(created)
        self.assertEqual(certificate.certificate_id, 'NEX-FRESH-ABC123')

    def test_concurrent_issue_resolves_to_existing(self):
        existing = self.issue()
        real_filter = Certificate.objects.filter
        lookups = []

        def miss_first_lookup(*args, **kwargs):
            # the first lookup runs before the other request's insert is visible
            lookups.append(kwargs)
            if len(lookups) == 1:
                return Certificate.objects.none()
            return real_filter(*args, **kwargs)

        with mock.patch.object(Certificate.objects, 'filter', side_effect=miss_first_lookup):
            certificate, created = Certificate.issue(Internship.objects.get(pk=self.internship.pk))

        self.assertIs(created, False)
        self.assertEqual(certificate.certificate_id, existing.certificate_id)
        self.assertEqual(Certificate.objects.count(), 1)
        self.assertEqual(len(lookups), 2)

    def test_issued_notification_points_at_certificate(self):
        certificate = self.issue()
        notification = Notification.objects.get(title='Certificate Issued')
        self.assertEqual(notification.certificate, certificate)

    def test_issue_returns_existing(self):
        certificate = self.issue()
        again, created = Certificate.issue(self.internship)
        self.assertFalse(created)
        self.assertEqual(again.pk, certificate.pk)

    def test_issued_certificate_creates_notification(self):
        certificate = self.issue()
        self.assertTrue(Notification.objects.filter(message__contains=certificate.certificate_id).exists())

    def test_render_certificate_image(self):
        image = render_certificate_image(self.issue())
        self.assertTrue(image.startswith(b'\x89PNG'))


class ArtifactUploadTests(CertificateTestCase):
    def test_upload_disabled_without_credentials(self):
        certificate = self.issue()
        self.assertEqual(certificate.artifact_status, Certificate.ArtifactStatus.DISABLED)
        self.assertIsNone(certificate.artifact_url)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_successful_upload(self, mock_post):
        mock_post.return_value = cloudinary_response()

        certificate = self.issue()

        self.assertEqual(certificate.artifact_status, Certificate.ArtifactStatus.UPLOADED)
        self.assertEqual(certificate.artifact_url, 'https://res.cloudinary.com/nexbyte/image/upload/cert.png')
        _, kwargs = mock_post.call_args
        self.assertEqual(kwargs['data']['public_id'], certificate.certificate_id)
        self.assertIn('signature', kwargs['data'])
        self.assertIn('timeout', kwargs)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_failed_upload_keeps_certificate(self, mock_post):
        mock_post.side_effect = requests.Timeout('timed out')

        result = complete_internship(self.internship.pk)

        self.assertTrue(result.created)
        certificate = Certificate.objects.get(pk=result.certificate.pk)
        self.assertEqual(certificate.artifact_status, Certificate.ArtifactStatus.PENDING)
        self.assertEqual(certificate.artifact_attempts, 1)
        self.assertIn('timed out', certificate.artifact_error)
        self.internship.refresh_from_db()
        self.assertTrue(self.internship.is_completed)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_non_object_json_leaves_artifact_pending(self, mock_post):
        response = cloudinary_response()
        response.json.return_value = ['not', 'an', 'object']
        mock_post.return_value = response

        result = complete_internship(self.internship.pk)

        certificate = Certificate.objects.get(pk=result.certificate.pk)
        self.assertEqual(certificate.artifact_status, Certificate.ArtifactStatus.PENDING)
        self.assertIn('secure_url', certificate.artifact_error)
        pending = Notification.objects.get(title='Certificate Artifact Pending')
        self.assertEqual(pending.certificate, certificate)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_retry_attaches_url_without_changing_id(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('down')
        certificate = self.issue()
        certificate_id = certificate.certificate_id

        mock_post.side_effect = None
        mock_post.return_value = cloudinary_response()
        self.client.force_authenticate(user=self.admin_user)
        response = self.client.post(f'/api/certificates/{certificate_id}/upload-artifact/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['certificate_id'], certificate_id)
        self.assertEqual(response.data['artifact_status'], 'uploaded')
        self.assertEqual(Certificate.objects.count(), 1)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_repeat_completion_retries_pending_upload(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('down')
        first = complete_internship(self.internship.pk)

        mock_post.side_effect = None
        mock_post.return_value = cloudinary_response()
        second = complete_internship(self.internship.pk)

        self.assertEqual(first.certificate.certificate_id, second.certificate.certificate_id)
        self.assertEqual(second.certificate.artifact_status, Certificate.ArtifactStatus.UPLOADED)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_retry_pending_artifacts(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('down')
        self.issue()

        mock_post.side_effect = None
        mock_post.return_value = cloudinary_response()
        self.assertEqual(retry_pending_artifacts(), 1)
        self.assertEqual(retry_pending_artifacts(), 0)

    @override_settings(**CLOUDINARY)
    @mock.patch('certificates.storage.requests.post')
    def test_retry_command(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('down')
        certificate = self.issue()

        mock_post.side_effect = None
        mock_post.return_value = cloudinary_response()
        call_command('retry_certificate_artifacts', verbosity=0)

        certificate.refresh_from_db()
        self.assertEqual(certificate.artifact_status, Certificate.ArtifactStatus.UPLOADED)

    @mock.patch('certificates.storage.requests.post')
    def test_uploaded_certificate_is_not_reuploaded(self, mock_post):
        certificate = self.issue()
        certificate.artifact_status = Certificate.ArtifactStatus.UPLOADED
        certificate.artifact_url = 'https://example.com/cert.png'
        upload_artifact(certificate)
        mock_post.assert_not_called()

    def test_upload_signature(self):
        params = {'timestamp': '1315060510', 'public_id': 'sample', 'folder': 'certs'}
        expected = sign_upload_params({'folder': 'certs', 'public_id': 'sample', 'timestamp': '1315060510'}, 'abcd')
        self.assertEqual(sign_upload_params(params, 'abcd'), expected)
        self.assertEqual(len(expected), 40)


class CertificateAPITests(CertificateTestCase):
    def test_verify_is_public(self):
        certificate = self.issue()
        response = self.client.get(f'/api/certificates/verify/{certificate.certificate_id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['valid'])
        self.assertEqual(response.data['certificate']['intern_name'], 'Ada Intern')
        self.assertEqual(response.data['certificate']['internship_title'], 'Frontend Engineering')
        self.assertNotIn('intern', response.data['certificate'])

    def test_verify_unknown_certificate(self):
        response = self.client.get('/api/certificates/verify/NEX-NOPE-000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'valid': False, 'certificate': None})

    def test_verify_ignores_bad_credentials(self):
        certificate = self.issue()
        self.client.credentials(HTTP_AUTHORIZATION='Bearer expired-token')
        response = self.client.get(f'/api/certificates/verify/{certificate.certificate_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_view_certificate(self):
        certificate = self.issue()
        response = self.client.get(f'/api/certificates/view/{certificate.certificate_id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['company'], 'NexByte')
        self.assertTrue(response.data['valid'])

        response = self.client.get('/api/certificates/view/NEX-NOPE-000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_owner_lists_own_certificates(self):
        certificate = self.issue()
        self.client.force_authenticate(user=self.intern)
        response = self.client.get('/api/certificates/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['certificate_id'] for c in response.data], [certificate.certificate_id])

    def test_admin_list_and_intern_lookup(self):
        certificate = self.issue()
        self.client.force_authenticate(user=self.admin_user)

        response = self.client.get('/api/certificates/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

        response = self.client.get(f'/api/certificates/intern/{self.intern.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['certificate_id'], certificate.certificate_id)

        response = self.client.get('/api/certificates/intern/999999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_list_requires_admin(self):
        self.issue()
        self.client.force_authenticate(user=self.intern)
        response = self.client.get('/api/certificates/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
