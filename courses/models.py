from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator


class Course(models.Model):
    title = models.CharField(max_length=200, unique=True)
    description = models.TextField(blank=True, default='')
    instructor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='courses_taught',
    )
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    is_published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    @property
    def instructor_name(self):
        return self.instructor.display_name if self.instructor else ''


class Lesson(models.Model):
    TYPE_VIDEO = 'video'
    TYPE_ARTICLE = 'article'
    TYPE_QUIZ = 'quiz'

    LESSON_TYPE_CHOICES = [
        (TYPE_VIDEO, 'Video'),
        (TYPE_ARTICLE, 'Article'),
        (TYPE_QUIZ, 'Quiz'),
    ]

    course = models.ForeignKey(Course, related_name='lessons', on_delete=models.CASCADE)
    title = models.CharField(max_length=200)
    content = models.TextField(blank=True, default='')
    lesson_type = models.CharField(max_length=20, choices=LESSON_TYPE_CHOICES, default=TYPE_VIDEO)
    order = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.course.title} - {self.title}"


class Question(models.Model):
    """
    A gradable question attached to a quiz lesson.

    ``correct_answers`` always holds a list of strings:
    - single_choice: exactly one entry, which must be one of ``options``
    - multi_choice: one or more entries, all taken from ``options``
    - free_text: every accepted answer; matching ignores case and spacing
    """
    SINGLE_CHOICE = 'single_choice'
    MULTI_CHOICE = 'multi_choice'
    FREE_TEXT = 'free_text'

    QUESTION_TYPE_CHOICES = [
        (SINGLE_CHOICE, 'Single choice'),
        (MULTI_CHOICE, 'Multiple choice'),
        (FREE_TEXT, 'Free text'),
    ]

    lesson = models.ForeignKey(Lesson, related_name='questions', on_delete=models.CASCADE)
    question_type = models.CharField(max_length=20, choices=QUESTION_TYPE_CHOICES)
    prompt = models.TextField()
    options = models.JSONField(default=list, blank=True)
    correct_answers = models.JSONField(default=list)
    points = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['order', 'id']

    def __str__(self):
        return f"{self.lesson.title} - Q{self.order or self.id}"

    def clean(self):
        if not isinstance(self.correct_answers, list) or not self.correct_answers:
            raise ValidationError({'correct_answers': "At least one correct answer is required."})
        if not all(isinstance(a, str) for a in self.correct_answers):
            raise ValidationError({'correct_answers': "Correct answers must be strings."})
        if self.question_type == self.FREE_TEXT:
            return
        if not isinstance(self.options, list) or not self.options:
            raise ValidationError({'options': "Choice questions need options."})
        if not all(isinstance(o, str) for o in self.options):
            raise ValidationError({'options': "Options must be strings."})
        if not set(self.correct_answers) <= set(self.options):
            raise ValidationError({'correct_answers': "Correct answers must be taken from the options."})
        if self.question_type == self.SINGLE_CHOICE and len(self.correct_answers) != 1:
            raise ValidationError({'correct_answers': "Single choice questions have exactly one correct answer."})


class Enrollment(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='enrollments')
    course = models.ForeignKey(Course, on_delete=models.CASCADE, related_name='enrollments')
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    enrolled_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('student', 'course')
        ordering = ['-enrolled_at']

    def __str__(self):
        return f"{self.student.email} - {self.course.title} ({self.progress}%)"

    @property
    def is_completed(self):
        return self.progress >= 100


class LessonProgress(models.Model):
    student = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='lesson_progress')
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='progress_records')
    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ('student', 'lesson')
        verbose_name = "Lesson Progress"
        verbose_name_plural = "Lesson Progress"

    def __str__(self):
        return f"{self.student.email} - {self.lesson.title} ({'Done' if self.completed else 'Pending'})"
