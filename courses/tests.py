from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework import status
from .models import Course, Lesson, Question, Enrollment, LessonProgress
from . import services

User = get_user_model()


class CourseTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='instructor@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.other_instructor = User.objects.create_user(
            email='instructor2@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Brand Design 101', instructor=self.instructor)
        self.hidden = Course.objects.create(title='Draft Course', instructor=self.instructor, is_published=False)
        self.client = APIClient()

    def test_public_list_hides_unpublished(self):
        response = self.client.get('/api/courses/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = [c['title'] for c in response.json()['data']]
        self.assertIn('Brand Design 101', titles)
        self.assertNotIn('Draft Course', titles)

    def test_instructor_sees_unpublished(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.get(f'/api/courses/{self.hidden.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_create_course_as_instructor(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.post('/api/courses/', {'title': 'Motion Graphics', 'price': '49.00'})
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Course.objects.get(title='Motion Graphics').instructor, self.instructor)

    def test_student_cannot_create_course(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/courses/', {'title': 'Nope'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_only_owner_updates_course(self):
        self.client.force_authenticate(user=self.other_instructor)
        response = self.client.patch(f'/api/courses/{self.course.id}/', {'title': 'Taken over'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.instructor)
        response = self.client.patch(f'/api/courses/{self.course.id}/', {'title': 'Brand Design 102'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_enroll_is_idempotent(self):
        self.client.force_authenticate(user=self.student)
        first = self.client.post(f'/api/courses/{self.course.id}/enroll/')
        second = self.client.post(f'/api/courses/{self.course.id}/enroll')
        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(second.json()['message'], "Already enrolled")
        self.assertEqual(Enrollment.objects.filter(student=self.student, course=self.course).count(), 1)

    def test_cannot_enroll_in_unpublished_course(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post(f'/api/courses/{self.hidden.id}/enroll/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_my_enrollments(self):
        Enrollment.objects.create(student=self.student, course=self.course)
        self.client.force_authenticate(user=self.student)
        response = self.client.get('/api/courses/enrollments/my/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data'][0]['course_title'], 'Brand Design 101')


class LessonProgressTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='instructor@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Typography', instructor=self.instructor)
        self.lesson1 = Lesson.objects.create(course=self.course, title='Kerning', order=1)
        self.lesson2 = Lesson.objects.create(course=self.course, title='Pairing', order=2)
        self.client = APIClient()
        self.client.force_authenticate(user=self.student)

    def test_complete_requires_enrollment(self):
        response = self.client.post(f'/api/courses/lessons/{self.lesson1.id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_412_PRECONDITION_FAILED)
        self.assertFalse(LessonProgress.objects.exists())

    def test_progress_advances_to_completion(self):
        Enrollment.objects.create(student=self.student, course=self.course)

        response = self.client.post(f'/api/courses/lessons/{self.lesson1.id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['progress'], 50)

        # completing the same lesson twice changes nothing
        self.client.post(f'/api/courses/lessons/{self.lesson1.id}/complete/')
        self.assertEqual(services.get_completion_percentage(self.student, self.course), 50)

        response = self.client.post(f'/api/courses/lessons/{self.lesson2.id}/complete/')
        data = response.json()['data']
        self.assertEqual(data['progress'], 100)
        self.assertEqual(data['status'], Enrollment.STATUS_COMPLETED)
        self.assertIsNotNone(services.get_completion_date(self.student, self.course))

    def test_quiz_lessons_are_not_completed_directly(self):
        quiz = Lesson.objects.create(course=self.course, title='Check', lesson_type=Lesson.TYPE_QUIZ)
        Enrollment.objects.create(student=self.student, course=self.course)
        response = self.client.post(f'/api/courses/lessons/{quiz.id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_progress_without_lessons_is_zero(self):
        empty = Course.objects.create(title='Empty', instructor=self.instructor)
        self.assertEqual(services.calculate_progress(self.student, empty), 0)
        self.assertEqual(services.get_completion_percentage(self.student, empty), 0)


class QuestionBankTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='instructor@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.student = User.objects.create_user(email='student@test.com', password='x')
        self.course = Course.objects.create(title='Color Theory', instructor=self.instructor)
        self.lesson = Lesson.objects.create(course=self.course, title='Quiz', lesson_type=Lesson.TYPE_QUIZ)
        self.client = APIClient()

    def test_create_question(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.post('/api/courses/questions/', {
            'lesson': self.lesson.id,
            'question_type': Question.MULTI_CHOICE,
            'prompt': 'Which are primary colors?',
            'options': ['Red', 'Green', 'Blue', 'Yellow'],
            'correct_answers': ['Red', 'Blue', 'Yellow'],
            'points': 3,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_single_choice_needs_one_answer_from_options(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.post('/api/courses/questions/', {
            'lesson': self.lesson.id,
            'question_type': Question.SINGLE_CHOICE,
            'prompt': 'Warmest color?',
            'options': ['Red', 'Blue'],
            'correct_answers': ['Red', 'Orange'],
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('correct_answers', response.json()['data'])

    def test_students_cannot_read_the_bank(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.get('/api/courses/questions/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_lesson_hides_correct_answers(self):
        Question.objects.create(
            lesson=self.lesson, question_type=Question.FREE_TEXT,
            prompt='Name the complement of red', correct_answers=['green'],
        )
        self.client.force_authenticate(user=self.student)
        response = self.client.get(f'/api/courses/lessons/{self.lesson.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        question = response.json()['data']['questions'][0]
        self.assertNotIn('correct_answers', question)

    def test_answer_keys_must_be_strings(self):
        self.client.force_authenticate(user=self.instructor)
        response = self.client.post('/api/courses/questions/', {
            'lesson': self.lesson.id,
            'question_type': Question.FREE_TEXT,
            'prompt': 'How many primaries?',
            'correct_answers': [42],
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('correct_answers', response.json()['data'])

        response = self.client.post('/api/courses/questions/', {
            'lesson': self.lesson.id,
            'question_type': Question.MULTI_CHOICE,
            'prompt': 'Pick the warm colors',
            'options': [['Red'], 'Blue'],
            'correct_answers': ['Blue'],
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('options', response.json()['data'])
        self.assertFalse(Question.objects.exists())


class CourseOwnershipTestCase(TestCase):
    def setUp(self):
        self.instructor = User.objects.create_user(
            email='instructor@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.rival = User.objects.create_user(
            email='rival@test.com', password='x', role=User.ROLE_INSTRUCTOR
        )
        self.admin = User.objects.create_superuser(email='admin@test.com', password='x')
        self.course = Course.objects.create(title='Mine', instructor=self.instructor)
        self.rival_course = Course.objects.create(title='Theirs', instructor=self.rival)
        self.lesson = Lesson.objects.create(course=self.course, title='Quiz', lesson_type=Lesson.TYPE_QUIZ)
        self.rival_lesson = Lesson.objects.create(
            course=self.rival_course, title='Their quiz', lesson_type=Lesson.TYPE_QUIZ
        )
        self.question = Question.objects.create(
            lesson=self.lesson, question_type=Question.FREE_TEXT, prompt='Mine?', correct_answers=['yes'],
        )
        self.rival_question = Question.objects.create(
            lesson=self.rival_lesson, question_type=Question.FREE_TEXT, prompt='Theirs?',
            correct_answers=['secret'],
        )
        self.client = APIClient()
        self.client.force_authenticate(user=self.instructor)

    def test_cannot_move_lesson_into_foreign_course(self):
        response = self.client.patch(f'/api/courses/lessons/{self.lesson.id}/', {'course': self.rival_course.id})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.lesson.refresh_from_db()
        self.assertEqual(self.lesson.course, self.course)

    def test_cannot_move_question_into_foreign_lesson(self):
        response = self.client.patch(
            f'/api/courses/questions/{self.question.id}/', {'lesson': self.rival_lesson.id}
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.question.refresh_from_db()
        self.assertEqual(self.question.lesson, self.lesson)

    def test_question_bank_lists_own_courses_only(self):
        response = self.client.get('/api/courses/questions/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([q['id'] for q in response.json()['data']], [self.question.id])

        response = self.client.get(f'/api/courses/questions/{self.rival_question.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_sees_every_question(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get('/api/courses/questions/')
        self.assertEqual(len(response.json()['data']), 2)
