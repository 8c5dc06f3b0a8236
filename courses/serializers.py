from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from .models import Course, Lesson, Question, Enrollment


class CourseSerializer(serializers.ModelSerializer):
    instructor_name = serializers.CharField(read_only=True)
    lesson_count = serializers.SerializerMethodField()

    class Meta:
        model = Course
        fields = [
            'id', 'title', 'description', 'instructor', 'instructor_name',
            'price', 'is_published', 'lesson_count', 'created_at',
        ]
        read_only_fields = ['instructor', 'created_at']

    def get_lesson_count(self, obj):
        return obj.lessons.count()


class QuestionSerializer(serializers.ModelSerializer):
    """Full question, correct answers included. Instructor/admin use only."""

    class Meta:
        model = Question
        fields = [
            'id', 'lesson', 'question_type', 'prompt', 'options',
            'correct_answers', 'points', 'order',
        ]

    def validate(self, attrs):
        instance = Question(**{**self._current_values(), **attrs})
        try:
            instance.clean()
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.message_dict)
        return attrs

    def _current_values(self):
        if self.instance is None:
            return {}
        return {
            'lesson': self.instance.lesson,
            'question_type': self.instance.question_type,
            'prompt': self.instance.prompt,
            'options': self.instance.options,
            'correct_answers': self.instance.correct_answers,
            'points': self.instance.points,
            'order': self.instance.order,
        }


class PublicQuestionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Question
        fields = ['id', 'question_type', 'prompt', 'options', 'points', 'order']


class LessonSerializer(serializers.ModelSerializer):
    questions = PublicQuestionSerializer(many=True, read_only=True)

    class Meta:
        model = Lesson
        fields = ['id', 'course', 'title', 'content', 'lesson_type', 'order', 'questions', 'created_at']
        read_only_fields = ['created_at']


class CourseWithLessonsSerializer(CourseSerializer):
    lessons = LessonSerializer(many=True, read_only=True)

    class Meta(CourseSerializer.Meta):
        fields = CourseSerializer.Meta.fields + ['lessons']


class EnrollmentSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source='course.title', read_only=True)

    class Meta:
        model = Enrollment
        fields = ['id', 'course', 'course_title', 'progress', 'status', 'enrolled_at', 'completed_at']
        read_only_fields = fields
