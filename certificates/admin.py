from django.contrib import admin
from .models import Certificate


@admin.register(Certificate)
class CertificateAdmin(admin.ModelAdmin):
    list_display = ['certificate_id', 'student_name', 'course_name', 'status', 'issue_date']
    list_filter = ['status', 'issue_date']
    search_fields = ['certificate_id', 'student_name', 'student__email', 'course_name']
    readonly_fields = ['certificate_id', 'verification_url', 'issue_date', 'completed_at']
