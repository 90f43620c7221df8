"""
Admin configuration for students app
"""
from django.contrib import admin
from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    """Student Admin"""
    list_display = ['name', 'code', 'grade', 'group', 'parent_phone', 'monthly_fee', 'registered_at']
    list_filter = ['grade', 'group', 'registered_at']
    search_fields = ['name', 'code', 'parent_phone', 'student_phone']
    readonly_fields = ['code', 'created_at', 'updated_at']
    ordering = ['name']
