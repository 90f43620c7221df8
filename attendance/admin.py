"""
Admin configuration for attendance app
"""
from django.contrib import admin
from .models import AttendanceRecord


@admin.register(AttendanceRecord)
class AttendanceRecordAdmin(admin.ModelAdmin):
    list_display = ['student', 'date', 'present', 'notified', 'checked_in_at']
    list_filter = ['present', 'notified', 'date']
    search_fields = ['student__name', 'student__code']
    readonly_fields = ['created_at']
    ordering = ['-date']
