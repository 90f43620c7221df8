from django.contrib import admin
from .models import OfflineOperation


@admin.register(OfflineOperation)
class OfflineOperationAdmin(admin.ModelAdmin):
    using = 'offline'
    list_display = ['id', 'type', 'table', 'synced', 'attempts', 'timestamp', 'last_attempt_at']
    list_filter = ['table', 'type', 'synced']
    readonly_fields = ['timestamp', 'last_attempt_at', 'last_error', 'claimed_at']

    def get_queryset(self, request):
        return super().get_queryset(request).using(self.using)
