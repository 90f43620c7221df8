"""
Core models: AppSetting (key/value application settings).
"""
from django.db import models


class AppSetting(models.Model):
    """
    Application-wide setting, e.g. teacher_name, system_name, teacher_phone.
    Read once into core.context.AppContext; never read ad hoc by views.
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default='')
    description = models.CharField(max_length=255, blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'app_settings'
        verbose_name = 'App Setting'
        verbose_name_plural = 'App Settings'
        ordering = ['key']

    def __str__(self):
        return f"{self.key}={self.value}"
