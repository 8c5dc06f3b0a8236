from functools import partial
from unittest.mock import patch

from django.test import TestCase, TransactionTestCase, override_settings, skipUnlessDBFeature
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status

from admin_panel.models import Notification
from core.testing import run_concurrently
from courses.models import Course, Enrollment
from . import services
from .models import Certificate

User = get_user_model()


@override_settings(FRONTEND_URL="https://creativehub.test")
class CertificateTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='instructor@test.com', password='x', name='Grace Instructor', role=User.ROLE_INSTRUCTOR
        )
        self.student = User.objects.create_user(email='student@test.com', password='x', name='Ada Student')
        self.other = User.objects.create_user(email='other@test.com', password='x')
        self.admin = User.objects.create_superuser(email='admin@test.com', password='x')
        self.course = Course.objects.create(title='Logo Design', instructor=self.instructor)
        self.enrollment = Enrollment.objects.create(student=self.student, course=self.course)
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def complete_course(self, student=None):
        Enrollment.objects.filter(student=student or self.student, course=self.course).update(
            progress=100, status=Enrollment.STATUS_COMPLETED, completed_at=timezone.now()
        )

    def generate(self):
        return self.client.post('/api/certificates/generate', {'course_id': self.course.id})

    def test_incomplete_course_is_a_failed_precondition(self):
        response = self.generate()
        self.assertEqual(response.status_code, status.HTTP_412_PRECONDITION_FAILED)
        self.assertFalse(response.json()['success'])
        self.assertFalse(Certificate.objects.exists())

    def test_generate(self):
        self.complete_course()
        response = self.generate()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertRegex(data['certificate_id'], r'^CERT-\d{4}-[A-Z0-9]{10}$')
        self.assertEqual(data['student_name'], 'Ada Student')
        self.assertEqual(data['course_name'], 'Logo Design')
        self.assertEqual(data['instructor_name'], 'Grace Instructor')
        self.assertEqual(
            data['verification_url'],
            f"https://creativehub.test/certificate/verify/{data['certificate_id']}",
        )

    def test_generate_notifies_student(self):
        self.complete_course()
        self.generate()
        notifications = Notification.objects.filter(recipient=self.student)
        self.assertEqual(notifications.get().kind, Notification.KIND_CERTIFICATE_ISSUED)

    def test_generate_is_idempotent(self):
        self.complete_course()
        first = self.generate()
        second = self.generate()
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.json()['message'], "Certificate already issued")
        self.assertEqual(first.json()['data']['certificate_id'], second.json()['data']['certificate_id'])
        self.assertEqual(Certificate.objects.count(), 1)

    def test_ids_are_not_sequential(self):
        self.complete_course()
        Enrollment.objects.create(
            student=self.other, course=self.course, progress=100, status=Enrollment.STATUS_COMPLETED
        )
        first = self.generate().json()['data']['certificate_id']
        self.client.force_authenticate(user=self.other)
        second = self.generate().json()['data']['certificate_id']
        self.assertNotEqual(first, second)

    def test_parallel_issue_returns_stored_certificate(self):
        """Losing the insert race hands back the winner's certificate"""
        self.complete_course()
        winner = Certificate.objects.create(
            student=self.student, course=self.course, student_name='Ada Student',
            course_name='Logo Design', completed_at=timezone.now(),
        )
        with patch('certificates.services.find_certificate', side_effect=[None, winner]):
            response = self.generate()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['certificate_id'], winner.certificate_id)
        self.assertEqual(Certificate.objects.count(), 1)

    def test_id_collision_is_retried(self):
        other_course = Course.objects.create(title='Iconography')
        taken = Certificate.objects.create(
            student=self.other, course=other_course, student_name='x',
            course_name='Iconography', completed_at=timezone.now(),
        )
        self.complete_course()
        fresh_ids = [taken.certificate_id, 'CERT-2026-FRESH12345']
        with patch('certificates.services.generate_certificate_id', side_effect=fresh_ids):
            response = self.generate()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['certificate_id'], 'CERT-2026-FRESH12345')

    def test_unknown_course(self):
        response = self.client.post('/api/certificates/generate/', {'course_id': 9999})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_my_certificates(self):
        self.complete_course()
        self.generate()
        response = self.client.get('/api/certificates/my')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()['data']), 1)

    def test_verify_is_public(self):
        self.complete_course()
        certificate_id = self.generate().json()['data']['certificate_id']

        anonymous = APIClient()
        response = anonymous.get(f'/api/certificates/verify/{certificate_id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertTrue(data['valid'])
        self.assertEqual(data['student_name'], 'Ada Student')
        self.assertNotIn('student', data)
        self.assertNotIn('student@test.com', str(data))

        # same answer for the owner
        owner_view = self.client.get(f'/api/certificates/verify/{certificate_id}/').json()['data']
        self.assertEqual(owner_view, data)

    def test_verify_unknown_id(self):
        response = APIClient().get('/api/certificates/verify/CERT-2026-DOESNOTEXI')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.json()['success'])

    def test_revoked_certificate(self):
        self.complete_course()
        certificate_id = self.generate().json()['data']['certificate_id']

        self.client.force_authenticate(user=self.student)
        response = self.client.post(f'/api/certificates/{certificate_id}/revoke')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/certificates/{certificate_id}/revoke/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['status'], Certificate.STATUS_REVOKED)

        response = APIClient().get(f'/api/certificates/verify/{certificate_id}')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        self.client.force_authenticate(user=self.student)
        self.assertEqual(self.generate().status_code, status.HTTP_409_CONFLICT)
        mine = self.client.get('/api/certificates/my').json()['data']
        self.assertEqual([c['status'] for c in mine], [Certificate.STATUS_REVOKED])

    def test_download(self):
        self.complete_course()
        certificate_id = self.generate().json()['data']['certificate_id']

        response = self.client.get(f'/api/certificates/{certificate_id}/download')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

        self.client.force_authenticate(user=self.other)
        response = self.client.get(f'/api/certificates/{certificate_id}/download')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get(f'/api/certificates/{certificate_id}/download/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_admin_list_filters(self):
        self.complete_course()
        certificate_id = self.generate().json()['data']['certificate_id']
        Certificate.objects.filter(certificate_id=certificate_id).update(status=Certificate.STATUS_REVOKED)

        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/certificates/', {'status': 'revoked'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()['data']), 1)

        response = self.client.get('/api/certificates/', {'status': 'active'})
        self.assertEqual(response.json()['data'], [])

        self.client.force_authenticate(user=self.student)
        self.assertEqual(self.client.get('/api/certificates/').status_code, status.HTTP_403_FORBIDDEN)


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentIssueTestCase(TransactionTestCase):
    """Needs a database with concurrent writers (PostgreSQL, MySQL)"""

    def setUp(self):
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Parallel Course')
        Enrollment.objects.create(
            student=self.student, course=self.course, progress=100,
            status=Enrollment.STATUS_COMPLETED, completed_at=timezone.now(),
        )

    def test_parallel_generate_issues_one_certificate(self):
        generate = partial(services.generate_certificate, self.student, self.course.id)
        outcomes = run_concurrently(generate, generate, generate)

        self.assertEqual([exc for _, exc in outcomes], [None] * 3)
        ids = {certificate.certificate_id for (certificate, _), _ in outcomes}
        self.assertEqual(len(ids), 1)
        self.assertEqual(sum(1 for (_, created), _ in outcomes if created), 1)
        self.assertEqual(Certificate.objects.filter(student=self.student, course=self.course).count(), 1)
