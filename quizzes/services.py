import logging

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from core.exceptions import Conflict
from courses.models import Lesson
from courses.services import get_course, get_lesson, mark_lesson_completed
from .grading import accept_client_grading, grade_against_bank, score_answers
from .models import QuizAttempt

logger = logging.getLogger(__name__)

MAX_ATTEMPT_NUMBER_RETRIES = 5


def next_attempt_number(student, lesson):
    return QuizAttempt.objects.filter(student=student, lesson=lesson).count() + 1


def record_attempt(student, lesson, course, graded, total_score, max_score, percentage, passed):
    """
    Insert the attempt under the (student, lesson, attempt_number) unique
    constraint. A parallel submission that claimed the same number makes the
    insert fail, in which case the number is recomputed and the insert retried.
    """
    for _ in range(MAX_ATTEMPT_NUMBER_RETRIES):
        attempt_number = next_attempt_number(student, lesson)
        try:
            with transaction.atomic():
                return QuizAttempt.objects.create(
                    student=student,
                    lesson=lesson,
                    course=course,
                    answers=graded,
                    total_score=total_score,
                    max_score=max_score,
                    percentage=percentage,
                    passed=passed,
                    attempt_number=attempt_number,
                )
        except IntegrityError:
            logger.warning(
                f"Attempt number {attempt_number} already taken for {student.email} "
                f"on lesson {lesson.pk}, retrying"
            )

    raise Conflict("Too many simultaneous submissions for this quiz, please retry")


def submit_quiz(student, lesson_id, course_id, answers):
    course = get_course(course_id)
    lesson = get_lesson(lesson_id)
    if lesson.course_id != course.id:
        raise ValidationError({'lesson_id': ["Lesson does not belong to this course"]})

    questions = {q.id: q for q in lesson.questions.all()}
    if questions:
        graded = grade_against_bank(answers, questions)
    else:
        graded = accept_client_grading(answers)

    total_score, max_score, percentage, passed = score_answers(graded)

    with transaction.atomic():
        attempt = record_attempt(student, lesson, course, graded, total_score, max_score, percentage, passed)
        if passed and lesson.lesson_type == Lesson.TYPE_QUIZ:
            mark_lesson_completed(student, lesson)

    logger.info(
        f"Quiz attempt #{attempt.attempt_number} by {student.email} on lesson {lesson.pk}: "
        f"{total_score}/{max_score} ({'passed' if passed else 'failed'})"
    )
    return attempt


def get_student_results(student, course_id):
    course = get_course(course_id)
    return (
        QuizAttempt.objects.filter(student=student, course=course)
        .select_related('lesson')
        .order_by('-submitted_at', '-id')
    )
