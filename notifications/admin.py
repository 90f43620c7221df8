from django.contrib import admin
from .models import FcmToken, WhatsAppTemplate


@admin.register(WhatsAppTemplate)
class WhatsAppTemplateAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'target', 'is_active', 'updated_at']
    list_filter = ['is_active', 'target']


@admin.register(FcmToken)
class FcmTokenAdmin(admin.ModelAdmin):
    list_display = ['user', 'device_info', 'created_at']
    search_fields = ['user__email']
