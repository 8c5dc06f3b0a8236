from django.contrib import admin
from .models import CustomUser

# -------------------------------
# CustomUser Admin
# -------------------------------
@admin.register(CustomUser)
class CustomUserAdmin(admin.ModelAdmin):
    list_display = (
        'email',
        'name',
        'role',
        'is_active',
        'is_staff',
        'date_joined',
    )
    search_fields = ('email', 'name')
    list_filter = ('is_active', 'role')
    readonly_fields = ('date_joined',)
