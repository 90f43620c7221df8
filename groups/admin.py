"""
Admin configuration for groups app
"""
from django.contrib import admin
from .models import GradeLevel, Group


@admin.register(GradeLevel)
class GradeLevelAdmin(admin.ModelAdmin):
    list_display = ['code', 'label', 'sort_order', 'is_active']
    list_filter = ['is_active']
    ordering = ['sort_order', 'code']


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    """Group Admin"""
    list_display = ['name', 'grade', 'time', 'created_at']
    list_filter = ['grade', 'created_at']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['grade', 'name']
