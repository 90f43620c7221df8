"""
Alert rules (configuration) and alert events (triggered rule instances).
"""
import uuid

from django.db import models

SEVERITY_INFO = 'info'
SEVERITY_WARNING = 'warning'
SEVERITY_CRITICAL = 'critical'
SEVERITY_CHOICES = [
    (SEVERITY_INFO, 'Info'),
    (SEVERITY_WARNING, 'Warning'),
    (SEVERITY_CRITICAL, 'Critical'),
]


class AlertRule(models.Model):
    """
    Activation switch and metadata for one rule code.
    The evaluation logic lives in alerts.rules; is_active decides whether it runs.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=64, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES, default=SEVERITY_WARNING)
    is_active = models.BooleanField(default=True)
    config = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'alert_rules'
        verbose_name = 'Alert Rule'
        verbose_name_plural = 'Alert Rules'
        ordering = ['created_at']

    def __str__(self):
        return self.code


class AlertEvent(models.Model):
    """A rule firing for a student. open -> resolved once, never reopened."""
    STATUS_OPEN = 'open'
    STATUS_RESOLVED = 'resolved'
    STATUS_CHOICES = [
        (STATUS_OPEN, 'Open'),
        (STATUS_RESOLVED, 'Resolved'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='alert_events',
    )
    rule_code = models.CharField(max_length=64, db_index=True)
    title = models.CharField(max_length=255)
    message = models.TextField()
    severity = models.CharField(max_length=20, choices=SEVERITY_CHOICES)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    context = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'alert_events'
        verbose_name = 'Alert Event'
        verbose_name_plural = 'Alert Events'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.rule_code} {self.student_id} ({self.status})"
