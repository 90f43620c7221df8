"""
Notification models: WhatsApp message templates and push device tokens.
"""
import uuid

from django.conf import settings
from django.db import models


class WhatsAppTemplate(models.Model):
    """
    Editable message body for one message kind (absence, payment_reminder, ...).
    Placeholders use {name} syntax, e.g. {studentName}.
    """
    TARGET_PARENT = 'parent'
    TARGET_STUDENT = 'student'
    TARGET_BOTH = 'both'
    TARGET_CHOICES = [
        (TARGET_PARENT, 'Parent'),
        (TARGET_STUDENT, 'Student'),
        (TARGET_BOTH, 'Both'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    template = models.TextField()
    is_active = models.BooleanField(default=True)
    target = models.CharField(max_length=20, choices=TARGET_CHOICES, default=TARGET_PARENT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'whatsapp_templates'
        verbose_name = 'WhatsApp Template'
        verbose_name_plural = 'WhatsApp Templates'
        ordering = ['code']

    def __str__(self):
        return self.code


class FcmToken(models.Model):
    """Push device token registered by a staff browser/device."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='fcm_tokens',
    )
    token = models.TextField()
    device_info = models.CharField(max_length=200, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fcm_tokens'
        verbose_name = 'FCM Token'
        verbose_name_plural = 'FCM Tokens'
        constraints = [
            models.UniqueConstraint(fields=['user', 'token'], name='uniq_fcm_token_per_user'),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.token[:16]}..."
