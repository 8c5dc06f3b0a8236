from functools import partial
from unittest.mock import patch

from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status

from core.testing import run_concurrently
from courses.models import Course, Lesson, Question, Enrollment
from . import services
from .models import QuizAttempt

User = get_user_model()


def client_graded(question_id, is_correct, points, answer="A"):
    return {
        'question_id': question_id,
        'type': 'single_choice',
        'answer': answer,
        'is_correct': is_correct,
        'points': points,
    }


class QuizSubmissionTestCase(TestCase):
    """Lessons without a question bank: the caller grades each answer"""

    def setUp(self):
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='UI Kits')
        self.lesson = Lesson.objects.create(course=self.course, title='Grids', lesson_type=Lesson.TYPE_QUIZ)
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def submit(self, answers, lesson=None, course=None):
        return self.client.post('/api/quiz/submit', {
            'lesson_id': (lesson or self.lesson).id,
            'course_id': (course or self.course).id,
            'answers': answers,
        })

    def test_scoring(self):
        """10 of 20 points is 50% and does not pass"""
        response = self.submit([client_graded(1, True, 10), client_graded(2, False, 10)])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['total_score'], 10)
        self.assertEqual(data['max_score'], 20)
        self.assertEqual(data['percentage'], 50.0)
        self.assertFalse(data['passed'])
        self.assertEqual(data['attempt_number'], 1)

    def test_sixty_percent_passes(self):
        response = self.submit([client_graded(1, True, 6), client_graded(2, False, 4)])
        self.assertTrue(response.json()['data']['passed'])

    def test_attempt_numbers_are_contiguous(self):
        for _ in range(3):
            self.submit([client_graded(1, True, 5)])
        numbers = sorted(
            QuizAttempt.objects.filter(student=self.student, lesson=self.lesson)
            .values_list('attempt_number', flat=True)
        )
        self.assertEqual(numbers, [1, 2, 3])

    def test_empty_answers_rejected(self):
        response = self.submit([])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(QuizAttempt.objects.exists())

    def test_zero_points_rejected(self):
        response = self.submit([client_graded(1, False, 0)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(QuizAttempt.objects.exists())

    def test_client_grading_fields_required(self):
        response = self.submit([{'question_id': 1, 'type': 'single_choice', 'answer': 'A'}])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_question_ids_rejected(self):
        response = self.submit([client_graded(1, True, 5), client_graded(1, True, 5)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_answer_shape_follows_type(self):
        response = self.submit([{
            'question_id': 1, 'type': 'multi_choice', 'answer': 'A', 'is_correct': True, 'points': 1,
        }])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_lesson_and_course(self):
        response = self.client.post('/api/quiz/submit', {
            'lesson_id': 9999, 'course_id': self.course.id, 'answers': [client_graded(1, True, 1)],
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = self.client.post('/api/quiz/submit', {
            'lesson_id': self.lesson.id, 'course_id': 9999, 'answers': [client_graded(1, True, 1)],
        })
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_lesson_must_belong_to_course(self):
        other_course = Course.objects.create(title='Fonts')
        response = self.submit([client_graded(1, True, 1)], course=other_course)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unauthenticated(self):
        self.client.force_authenticate(user=None)
        response = self.submit([client_graded(1, True, 1)])
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_results_newest_first(self):
        self.submit([client_graded(1, False, 5)])
        self.submit([client_graded(1, True, 5)])
        response = self.client.get(f'/api/quiz/my/{self.course.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual([a['attempt_number'] for a in data], [2, 1])

    def test_results_only_show_own_attempts(self):
        other = User.objects.create_user(email='other@test.com', password='x')
        self.submit([client_graded(1, True, 5)])
        self.client.force_authenticate(user=other)
        response = self.client.get(f'/api/quiz/my/{self.course.id}/')
        self.assertEqual(response.json()['data'], [])

    def test_attempts_are_immutable(self):
        self.submit([client_graded(1, True, 5)])
        attempt = QuizAttempt.objects.get()
        attempt.total_score = 0
        with self.assertRaises(ValueError):
            attempt.save()

    def test_taken_attempt_number_is_retried(self):
        """A number claimed by a parallel submission is recomputed"""
        self.submit([client_graded(1, True, 5)])
        with patch('quizzes.services.next_attempt_number', side_effect=[1, 2]):
            with self.assertLogs('quizzes.services', level='WARNING'):
                response = self.submit([client_graded(1, True, 5)])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['attempt_number'], 2)

    def test_retries_are_bounded(self):
        self.submit([client_graded(1, True, 5)])
        with patch('quizzes.services.next_attempt_number', return_value=1):
            with self.assertLogs('quizzes.services', level='WARNING'):
                response = self.submit([client_graded(1, True, 5)])
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(QuizAttempt.objects.count(), 1)


class QuestionBankGradingTestCase(TestCase):
    """Lessons with a question bank are graded server-side"""

    def setUp(self):
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Audio Basics')
        self.lesson = Lesson.objects.create(course=self.course, title='Check', lesson_type=Lesson.TYPE_QUIZ)
        self.single = Question.objects.create(
            lesson=self.lesson, question_type=Question.SINGLE_CHOICE, prompt='Unit of loudness?',
            options=['dB', 'Hz'], correct_answers=['dB'], points=5,
        )
        self.multi = Question.objects.create(
            lesson=self.lesson, question_type=Question.MULTI_CHOICE, prompt='Lossless formats?',
            options=['FLAC', 'MP3', 'WAV'], correct_answers=['FLAC', 'WAV'], points=3,
        )
        self.free = Question.objects.create(
            lesson=self.lesson, question_type=Question.FREE_TEXT, prompt='Standard sample rate?',
            correct_answers=['44.1 kHz', '44100'], points=2,
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def submit(self, answers):
        return self.client.post('/api/quiz/submit/', {
            'lesson_id': self.lesson.id,
            'course_id': self.course.id,
            'answers': answers,
        })

    def test_server_grades_and_ignores_client_claims(self):
        response = self.submit([
            {'question_id': self.single.id, 'type': 'single_choice', 'answer': 'dB'},
            {'question_id': self.multi.id, 'type': 'multi_choice', 'answer': ['FLAC'],
             'is_correct': True, 'points': 100},
            {'question_id': self.free.id, 'type': 'free_text', 'answer': '  44.1   KHZ '},
        ])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['total_score'], 7)
        self.assertEqual(data['max_score'], 10)
        self.assertTrue(data['passed'])

        graded = {a['question_id']: a for a in data['answers']}
        self.assertFalse(graded[self.multi.id]['is_correct'])
        self.assertEqual(graded[self.multi.id]['points_awarded'], 0)

    def test_multi_choice_order_does_not_matter(self):
        response = self.submit([
            {'question_id': self.multi.id, 'type': 'multi_choice', 'answer': ['WAV', 'FLAC']},
        ])
        self.assertEqual(response.json()['data']['total_score'], 3)

    def test_unanswered_questions_count_towards_max(self):
        response = self.submit([
            {'question_id': self.single.id, 'type': 'single_choice', 'answer': 'dB'},
        ])
        data = response.json()['data']
        self.assertEqual(data['total_score'], 5)
        self.assertEqual(data['max_score'], 10)
        self.assertEqual(data['percentage'], 50.0)
        self.assertFalse(data['passed'])

    def test_type_mismatch_rejected(self):
        response = self.submit([
            {'question_id': self.single.id, 'type': 'free_text', 'answer': 'dB'},
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_foreign_question_rejected(self):
        response = self.submit([
            {'question_id': self.free.id + 1000, 'type': 'free_text', 'answer': 'dB'},
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_passing_marks_lesson_complete(self):
        enrollment = Enrollment.objects.create(student=self.student, course=self.course)
        self.submit([
            {'question_id': self.single.id, 'type': 'single_choice', 'answer': 'dB'},
            {'question_id': self.multi.id, 'type': 'multi_choice', 'answer': ['FLAC', 'WAV']},
        ])
        enrollment.refresh_from_db()
        self.assertEqual(enrollment.progress, 100)
        self.assertEqual(enrollment.status, Enrollment.STATUS_COMPLETED)

    def test_failing_leaves_progress(self):
        enrollment = Enrollment.objects.create(student=self.student, course=self.course)
        self.submit([
            {'question_id': self.free.id, 'type': 'free_text', 'answer': '48000'},
        ])
        enrollment.refresh_from_db()
        self.assertEqual(enrollment.progress, 0)

    def test_numeric_answer_keys_grade_as_text(self):
        """Answer keys stored before string-only validation still grade"""
        legacy = Question.objects.create(
            lesson=self.lesson, question_type=Question.FREE_TEXT,
            prompt='How many channels in 5.1 audio?', correct_answers=[6], points=2,
        )
        response = self.submit([
            {'question_id': legacy.id, 'type': 'free_text', 'answer': '6'},
        ])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        graded = {a['question_id']: a for a in response.json()['data']['answers']}
        self.assertTrue(graded[legacy.id]['is_correct'])


@skipUnlessDBFeature('has_select_for_update')
class ConcurrentSubmissionTestCase(TransactionTestCase):
    """Needs a database with concurrent writers (PostgreSQL, MySQL)"""

    def setUp(self):
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Parallel Course')
        self.lesson = Lesson.objects.create(course=self.course, title='Quiz', lesson_type=Lesson.TYPE_QUIZ)

    def test_parallel_submissions_number_contiguously(self):
        answers = [client_graded(1, True, 5)]
        submit = partial(services.submit_quiz, self.student, self.lesson.id, self.course.id, answers)

        outcomes = run_concurrently(*[submit] * 4)

        self.assertEqual([exc for _, exc in outcomes], [None] * 4)
        numbers = sorted(
            QuizAttempt.objects.filter(student=self.student, lesson=self.lesson)
            .values_list('attempt_number', flat=True)
        )
        self.assertEqual(numbers, [1, 2, 3, 4])
