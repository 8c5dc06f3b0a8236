from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('recipient', 'kind', 'title', 'priority', 'is_read', 'created_at')
    list_filter = ('kind', 'priority', 'is_read')
    search_fields = ('title', 'recipient__email')
    readonly_fields = ('created_at', 'read_at')
