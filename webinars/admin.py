from django.contrib import admin
from .models import Webinar, WebinarRegistration


@admin.register(Webinar)
class WebinarAdmin(admin.ModelAdmin):
    list_display = ['title', 'webinar_type', 'instructor', 'scheduled_at', 'status', 'total_registrations', 'max_participants']
    list_filter = ['webinar_type', 'status', 'is_free']
    search_fields = ['title', 'instructor__email']
    readonly_fields = ['end_time', 'total_registrations', 'created_at', 'updated_at']
    date_hierarchy = 'scheduled_at'


@admin.register(WebinarRegistration)
class WebinarRegistrationAdmin(admin.ModelAdmin):
    list_display = ['webinar', 'user', 'registered_at']
    search_fields = ['webinar__title', 'user__email']
    readonly_fields = ['registered_at']
