from rest_framework import serializers
from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'kind', 'title', 'message', 'priority', 'is_read', 'read_at', 'created_at']
        read_only_fields = fields


class DashboardStatsSerializer(serializers.Serializer):
    total_students = serializers.IntegerField()
    total_instructors = serializers.IntegerField()
    total_courses = serializers.IntegerField()
    published_courses = serializers.IntegerField()
    total_enrollments = serializers.IntegerField()
    completed_enrollments = serializers.IntegerField()
    total_certificates = serializers.IntegerField()
    certificates_this_month = serializers.IntegerField()
    total_quiz_attempts = serializers.IntegerField()
    quiz_pass_rate = serializers.FloatField()
    upcoming_webinars = serializers.IntegerField()
    webinar_registrations = serializers.IntegerField()
