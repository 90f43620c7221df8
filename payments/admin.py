"""
Admin configuration for payments app
"""
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payment Admin"""
    list_display = ['student', 'month', 'amount', 'paid', 'paid_at', 'notified']
    list_filter = ['paid', 'notified', 'month']
    search_fields = ['student__name', 'student__code']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-month']
