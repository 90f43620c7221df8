from django.contrib import admin
from .models import AlertEvent, AlertRule


@admin.register(AlertRule)
class AlertRuleAdmin(admin.ModelAdmin):
    list_display = ['code', 'title', 'severity', 'is_active', 'updated_at']
    list_filter = ['severity', 'is_active']
    list_editable = ['is_active']


@admin.register(AlertEvent)
class AlertEventAdmin(admin.ModelAdmin):
    list_display = ['student', 'rule_code', 'severity', 'status', 'created_at', 'resolved_at']
    list_filter = ['status', 'severity', 'rule_code']
    search_fields = ['student__name', 'student__code', 'title']
    readonly_fields = ['created_at', 'resolved_at']
