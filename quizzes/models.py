# quizzes/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone
from courses.models import Course, Lesson


class QuizAttempt(models.Model):
    """One graded submission of a lesson quiz. Never updated once stored."""
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='quiz_attempts')
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='quiz_attempts')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='quiz_attempts')
    answers = models.JSONField(default=list)
    total_score = models.PositiveIntegerField()
    max_score = models.PositiveIntegerField()
    percentage = models.FloatField()
    passed = models.BooleanField()
    attempt_number = models.PositiveIntegerField()
    submitted_at = models.DateTimeField(default=timezone.now)

    class Meta:
        unique_together = ['student', 'lesson', 'attempt_number']
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['student', 'course'], name='quiz_attempt_student_course'),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Quiz attempts are immutable once submitted.")
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.student.email} - {self.lesson.title} #{self.attempt_number} - {self.percentage:.1f}%"
