from django.test import TestCase
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status
from certificates.models import Certificate
from courses.models import Course, Lesson, Enrollment
from quizzes.models import QuizAttempt
from .models import Notification

User = get_user_model()


class DashboardTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(
            email='admin@test.com',
            password='admin123'
        )
        self.instructor = User.objects.create_user(
            email='instructor@test.com',
            password='instructor123',
            role=User.ROLE_INSTRUCTOR
        )
        self.student_user = User.objects.create_user(
            email='student@test.com',
            password='student123'
        )
        self.client = APIClient()

    def test_dashboard_stats(self):
        """Dashboard counts reflect the platform"""
        course = Course.objects.create(title='Vector Art', instructor=self.instructor)
        lesson = Lesson.objects.create(course=course, title='Quiz', lesson_type=Lesson.TYPE_QUIZ)
        Enrollment.objects.create(
            student=self.student_user, course=course, progress=100, status=Enrollment.STATUS_COMPLETED
        )
        Certificate.objects.create(
            student=self.student_user, course=course, student_name='s',
            course_name='Vector Art', completed_at=timezone.now(),
        )
        for number, passed in [(1, False), (2, True)]:
            QuizAttempt.objects.create(
                student=self.student_user, lesson=lesson, course=course, answers=[],
                total_score=1 if passed else 0, max_score=1, percentage=100.0 if passed else 0.0,
                passed=passed, attempt_number=number,
            )

        self.client.force_authenticate(user=self.admin_user)
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['total_students'], 1)
        self.assertEqual(data['total_instructors'], 1)
        self.assertEqual(data['total_courses'], 1)
        self.assertEqual(data['published_courses'], 1)
        self.assertEqual(data['completed_enrollments'], 1)
        self.assertEqual(data['total_certificates'], 1)
        self.assertEqual(data['certificates_this_month'], 1)
        self.assertEqual(data['total_quiz_attempts'], 2)
        self.assertEqual(data['quiz_pass_rate'], 50.0)

    def test_dashboard_stats_unauthenticated(self):
        """Test dashboard stats endpoint without authentication"""
        response = self.client.get('/api/admin-panel/dashboard/stats/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_stats_student(self):
        self.client.force_authenticate(user=self.student_user)
        response = self.client.get('/api/admin-panel/dashboard/stats')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class NotificationTestCase(TestCase):
    def setUp(self):
        self.student_user = User.objects.create_user(email='student@test.com', password='x')
        self.other_user = User.objects.create_user(email='other@test.com', password='x')
        self.mine = Notification.objects.create(
            title="Test Notification",
            message="This is a test",
            priority=Notification.PRIORITY_HIGH,
            recipient=self.student_user,
        )
        Notification.objects.create(title="Second", message="Another", recipient=self.student_user)
        self.theirs = Notification.objects.create(title="Theirs", message="x", recipient=self.other_user)
        self.client = APIClient()
        self.client.force_authenticate(user=self.student_user)

    def test_list_own_notifications(self):
        response = self.client.get('/api/notifications/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = {n['title'] for n in response.json()['data']}
        self.assertEqual(titles, {"Test Notification", "Second"})

    def test_mark_read(self):
        response = self.client.post(f'/api/notifications/{self.mine.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.mine.refresh_from_db()
        self.assertTrue(self.mine.is_read)
        self.assertIsNotNone(self.mine.read_at)

        response = self.client.get('/api/notifications/', {'unread': 'true'})
        self.assertEqual([n['title'] for n in response.json()['data']], ["Second"])

    def test_cannot_read_someone_elses(self):
        response = self.client.post(f'/api/notifications/{self.theirs.id}/read/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_all_read(self):
        response = self.client.post('/api/notifications/read-all/')
        self.assertEqual(response.json()['data']['updated'], 2)
        response = self.client.get('/api/notifications/unread-count/')
        self.assertEqual(response.json()['data']['count'], 0)
        self.theirs.refresh_from_db()
        self.assertFalse(self.theirs.is_read)
