from django.contrib import admin
from .models import StudentBlock


@admin.register(StudentBlock)
class StudentBlockAdmin(admin.ModelAdmin):
    list_display = ['student', 'block_type', 'is_active', 'triggered_by_rule_code', 'updated_at']
    list_filter = ['is_active', 'block_type', 'triggered_by_rule_code']
    search_fields = ['student__name', 'student__code', 'reason']
    readonly_fields = ['created_at', 'updated_at']
