from rest_framework import serializers
from .models import Certificate


class GenerateCertificateSerializer(serializers.Serializer):
    course_id = serializers.IntegerField(min_value=1)


class CertificateSerializer(serializers.ModelSerializer):
    class Meta:
        model = Certificate
        fields = [
            "id", "certificate_id", "student", "course", "student_name", "course_name",
            "instructor_name", "completed_at", "issue_date", "verification_url", "status",
        ]
        read_only_fields = fields


class CertificateVerificationSerializer(serializers.ModelSerializer):
    """What anyone holding a certificate id may see: no emails, no internal ids."""
    valid = serializers.SerializerMethodField()

    class Meta:
        model = Certificate
        fields = [
            "valid", "certificate_id", "student_name", "course_name", "instructor_name",
            "completed_at", "issue_date", "status", "verification_url",
        ]
        read_only_fields = fields

    def get_valid(self, obj):
        return obj.is_active
