"""
Enrollment and progress tracking.

Other apps ask this module whether a student has finished a course; nothing
outside it writes to Enrollment or LessonProgress.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from .models import Course, Enrollment, Lesson, LessonProgress

logger = logging.getLogger(__name__)


def get_course(course_id):
    try:
        return Course.objects.select_related('instructor').get(pk=course_id)
    except (Course.DoesNotExist, ValueError, TypeError):
        raise NotFound("Course not found")


def get_lesson(lesson_id):
    try:
        return Lesson.objects.select_related('course').get(pk=lesson_id)
    except (Lesson.DoesNotExist, ValueError, TypeError):
        raise NotFound("Lesson not found")


def enroll(student, course):
    """Idempotent: returns (enrollment, created)."""
    try:
        with transaction.atomic():
            enrollment, created = Enrollment.objects.get_or_create(student=student, course=course)
    except IntegrityError:
        # lost a race with a parallel enroll call
        enrollment, created = Enrollment.objects.get(student=student, course=course), False

    if created:
        logger.info(f"{student.email} enrolled in course {course.pk}")
    return enrollment, created


def get_completion_percentage(student, course):
    enrollment = Enrollment.objects.filter(student=student, course=course).only('progress').first()
    return enrollment.progress if enrollment else 0


def get_completion_date(student, course):
    enrollment = Enrollment.objects.filter(student=student, course=course).only('completed_at').first()
    return enrollment.completed_at if enrollment else None


def calculate_progress(student, course):
    total = Lesson.objects.filter(course=course).count()
    if total == 0:
        return 0

    completed = LessonProgress.objects.filter(
        student=student,
        lesson__course=course,
        completed=True,
    ).count()

    return int((completed / total) * 100)


def mark_lesson_completed(student, lesson):
    """
    Records the lesson as done and refreshes the enrollment progress.

    Returns the refreshed enrollment, or None if the student is not enrolled
    in the lesson's course.
    """
    with transaction.atomic():
        enrollment = (
            Enrollment.objects.select_for_update()
            .filter(student=student, course_id=lesson.course_id)
            .first()
        )
        if enrollment is None:
            return None

        progress, _ = LessonProgress.objects.get_or_create(student=student, lesson=lesson)
        if not progress.completed:
            progress.completed = True
            progress.completed_at = timezone.now()
            progress.save(update_fields=['completed', 'completed_at'])

        enrollment.progress = calculate_progress(student, lesson.course)
        if enrollment.is_completed and enrollment.status != Enrollment.STATUS_COMPLETED:
            enrollment.status = Enrollment.STATUS_COMPLETED
            enrollment.completed_at = timezone.now()
            logger.info(f"{student.email} completed course {lesson.course_id}")
        enrollment.save(update_fields=['progress', 'status', 'completed_at'])

    return enrollment
