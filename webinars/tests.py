from datetime import timedelta
from functools import partial

from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework import status

from admin_panel.models import Notification
from core.exceptions import Conflict
from core.testing import run_concurrently
from . import services
from .models import Webinar, WebinarRegistration

User = get_user_model()


class WebinarTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='host@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.other_instructor = User.objects.create_user(
            email='host2@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.student2 = User.objects.create_user(email='student2@test.com', password='x')
        self.admin = User.objects.create_superuser(email='admin@test.com', password='x')
        self.webinar = Webinar.objects.create(
            title='Intro to Kinetic Type',
            description='Live session',
            instructor=self.instructor,
            webinar_type='workshop',
            meeting_link='https://meet.example.com/kinetic',
            meeting_password='s3cret',
            scheduled_at=timezone.now() + timedelta(days=3),
            duration=90,
        )
        self.client = APIClient()

    def register(self, user, webinar=None):
        self.client.force_authenticate(user=user)
        return self.client.post(f'/api/webinars/{(webinar or self.webinar).id}/register')

    def test_end_time_is_derived(self):
        self.assertEqual(self.webinar.end_time, self.webinar.scheduled_at + timedelta(minutes=90))

    def test_create_as_instructor(self):
        self.client.force_authenticate(user=self.instructor)
        scheduled_at = timezone.now() + timedelta(days=7)
        response = self.client.post('/api/webinars', {
            'title': 'Color Grading Q&A',
            'description': 'Bring your footage',
            'webinar_type': 'seminar',
            'meeting_link': 'https://meet.example.com/grading',
            'scheduled_at': scheduled_at.isoformat(),
            'duration': 45,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        webinar = Webinar.objects.get(title='Color Grading Q&A')
        self.assertEqual(webinar.instructor, self.instructor)
        self.assertEqual(webinar.end_time, webinar.scheduled_at + timedelta(minutes=45))

    def test_student_cannot_create(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/webinars/', {'title': 'Nope'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_free_webinar_cannot_have_price(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.post('/api/webinars/', {
            'title': 'Priced',
            'description': 'x',
            'webinar_type': 'webinar',
            'meeting_link': 'https://meet.example.com/priced',
            'scheduled_at': (timezone.now() + timedelta(days=1)).isoformat(),
            'duration': 30,
            'is_free': True,
            'price': '10.00',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('price', response.json()['data'])

    def test_public_listing_hides_meeting_details(self):
        response = self.client.get('/api/webinars/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        listed = response.json()['data'][0]
        self.assertNotIn('meeting_link', listed)
        self.assertNotIn('meeting_password', listed)

        self.client.force_authenticate(user=self.instructor)
        response = self.client.get(f'/api/webinars/{self.webinar.id}')
        self.assertEqual(response.json()['data']['meeting_link'], 'https://meet.example.com/kinetic')

    def test_listing_filters(self):
        Webinar.objects.create(
            title='Old one', description='x', instructor=self.other_instructor, webinar_type='seminar',
            meeting_link='https://meet.example.com/old', scheduled_at=timezone.now() - timedelta(days=3),
            duration=30, status=Webinar.STATUS_COMPLETED,
        )
        response = self.client.get('/api/webinars/', {'webinar_type': 'seminar'})
        self.assertEqual([w['title'] for w in response.json()['data']], ['Old one'])

        response = self.client.get('/api/webinars/', {'instructor': self.instructor.id})
        self.assertEqual([w['title'] for w in response.json()['data']], ['Intro to Kinetic Type'])

    def test_upcoming_skips_past_webinars(self):
        Webinar.objects.create(
            title='Yesterday', description='x', instructor=self.instructor, webinar_type='seminar',
            meeting_link='https://meet.example.com/y', scheduled_at=timezone.now() - timedelta(days=1),
            duration=30,
        )
        response = self.client.get('/api/webinars/upcoming/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([w['title'] for w in response.json()['data']], ['Intro to Kinetic Type'])

    def test_unknown_webinar(self):
        self.assertEqual(self.client.get('/api/webinars/9999').status_code, status.HTTP_404_NOT_FOUND)
        response = self.register(self.student, webinar=Webinar(pk=9999))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_register(self):
        response = self.register(self.student)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['total_registrations'], 1)
        self.assertTrue(data['is_registered'])
        self.assertEqual(data['meeting_link'], 'https://meet.example.com/kinetic')
        self.assertEqual(
            Notification.objects.get(recipient=self.student).kind, Notification.KIND_WEBINAR_REGISTERED
        )

    def test_register_twice_is_a_no_op(self):
        self.register(self.student)
        response = self.register(self.student)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['message'], "Already registered")
        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.total_registrations, 1)
        self.assertEqual(WebinarRegistration.objects.filter(webinar=self.webinar).count(), 1)

    def test_full_webinar_rejects_and_keeps_count(self):
        self.webinar.max_participants = 1
        self.webinar.save()
        self.register(self.student)

        response = self.register(self.student2)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()['message'], "Webinar is full")

        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.total_registrations, 1)
        self.assertFalse(WebinarRegistration.objects.filter(webinar=self.webinar, user=self.student2).exists())

    def test_closed_webinars_refuse_registration(self):
        self.webinar.status = Webinar.STATUS_CANCELLED
        self.webinar.save()
        self.assertEqual(self.register(self.student).status_code, status.HTTP_412_PRECONDITION_FAILED)

        self.webinar.status = Webinar.STATUS_UPCOMING
        self.webinar.registration_deadline = timezone.now() - timedelta(hours=1)
        self.webinar.save()
        self.assertEqual(self.register(self.student).status_code, status.HTTP_412_PRECONDITION_FAILED)
        self.assertFalse(WebinarRegistration.objects.exists())

    def test_stale_save_keeps_seat_count(self):
        stale = Webinar.objects.get(pk=self.webinar.pk)
        services.register_for_webinar(self.webinar.pk, self.student)
        stale.title = 'Renamed'
        stale.save()

        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.title, 'Renamed')
        self.assertEqual(self.webinar.total_registrations, 1)

    def test_owner_updates(self):
        self.client.force_authenticate(user=self.other_instructor)
        response = self.client.patch(f'/api/webinars/{self.webinar.id}/', {'title': 'Hijacked'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.instructor)
        response = self.client.patch(f'/api/webinars/{self.webinar.id}/', {'duration': 120})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.end_time, self.webinar.scheduled_at + timedelta(minutes=120))

    def test_only_admin_deletes(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.delete(f'/api/webinars/{self.webinar.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f'/api/webinars/{self.webinar.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Webinar.objects.exists())


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentRegistrationTestCase(TransactionTestCase):
    """Needs a database with concurrent writers (PostgreSQL, MySQL)"""

    def setUp(self):
        host = User.objects.create_user(email='host@test.com', password='x', role=User.ROLE_INSTRUCTOR)
        self.users = [User.objects.create_user(email=f'u{i}@test.com', password='x') for i in range(5)]
        self.webinar = Webinar.objects.create(
            title='Tiny room', description='x', instructor=host, webinar_type='workshop',
            meeting_link='https://meet.example.com/tiny',
            scheduled_at=timezone.now() + timedelta(days=1), duration=30, max_participants=2,
        )

    def test_parallel_registrations_never_oversell(self):
        calls = [
            partial(services.register_for_webinar, self.webinar.pk, user)
            for user in self.users
        ]
        outcomes = run_concurrently(*calls)

        accepted = [result for result, exc in outcomes if exc is None]
        rejected = [exc for _, exc in outcomes if exc is not None]
        self.assertEqual(len(accepted), 2)
        self.assertEqual(len(rejected), 3)
        self.assertTrue(all(isinstance(exc, Conflict) for exc in rejected))

        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.total_registrations, 2)
        self.assertEqual(WebinarRegistration.objects.filter(webinar=self.webinar).count(), 2)

    def test_parallel_repeat_registration_counts_once(self):
        user = self.users[0]
        register = partial(services.register_for_webinar, self.webinar.pk, user)
        outcomes = run_concurrently(register, register, register)

        self.assertEqual([exc for _, exc in outcomes], [None] * 3)
        self.assertEqual(sum(1 for (_, created), _ in outcomes if created), 1)
        self.webinar.refresh_from_db()
        self.assertEqual(self.webinar.total_registrations, 1)
