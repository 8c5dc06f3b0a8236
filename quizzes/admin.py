from django.contrib import admin
from .models import QuizAttempt


@admin.register(QuizAttempt)
class QuizAttemptAdmin(admin.ModelAdmin):
    list_display = ['student', 'lesson', 'attempt_number', 'total_score', 'max_score', 'percentage', 'passed', 'submitted_at']
    list_filter = ['passed', 'course']
    search_fields = ['student__email', 'lesson__title']
    readonly_fields = [f.name for f in QuizAttempt._meta.fields]

    def has_change_permission(self, request, obj=None):
        return False
