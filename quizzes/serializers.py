from rest_framework import serializers
from courses.models import Question
from .models import QuizAttempt


class AnswerSerializer(serializers.Serializer):
    """
    One answer, tagged by question type:
    single_choice and free_text carry a string, multi_choice a list of strings.
    """
    question_id = serializers.IntegerField(min_value=1)
    type = serializers.ChoiceField(choices=Question.QUESTION_TYPE_CHOICES)
    answer = serializers.JSONField()
    is_correct = serializers.BooleanField(required=False)
    points = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        answer = attrs['answer']
        if attrs['type'] == Question.MULTI_CHOICE:
            if not isinstance(answer, list) or not all(isinstance(a, str) for a in answer):
                raise serializers.ValidationError({'answer': "multi_choice answers must be a list of strings"})
        elif not isinstance(answer, str):
            raise serializers.ValidationError({'answer': f"{attrs['type']} answers must be a string"})
        return attrs


class QuizSubmissionSerializer(serializers.Serializer):
    lesson_id = serializers.IntegerField(min_value=1)
    course_id = serializers.IntegerField(min_value=1)
    answers = AnswerSerializer(many=True, allow_empty=False)

    def validate_answers(self, value):
        ids = [a['question_id'] for a in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError("Each question may be answered only once")
        return value


class QuizAttemptSerializer(serializers.ModelSerializer):
    lesson_title = serializers.CharField(source='lesson.title', read_only=True)

    class Meta:
        model = QuizAttempt
        fields = [
            'id', 'student', 'lesson', 'lesson_title', 'course', 'answers',
            'total_score', 'max_score', 'percentage', 'passed',
            'attempt_number', 'submitted_at',
        ]
        read_only_fields = fields
