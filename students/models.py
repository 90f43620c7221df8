"""
Student roster.
code: short unique identifier printed on the QR card, generated on enrollment.
"""
import uuid

from django.db import models
from django.utils import timezone


class Student(models.Model):
    """
    Enrolled student. Deleting a student cascades to attendance, payments,
    exam results, lesson grades, blocks and alert events.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    code = models.CharField(max_length=20, unique=True, editable=False)
    name = models.CharField(max_length=255)
    grade = models.ForeignKey(
        'groups.GradeLevel',
        on_delete=models.PROTECT,
        related_name='students',
        db_column='grade',
    )
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students',
    )
    parent_phone = models.CharField(max_length=20)
    student_phone = models.CharField(max_length=20, blank=True, null=True)
    monthly_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    registered_at = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        verbose_name = 'Student'
        verbose_name_plural = 'Students'
        ordering = ['name']
        indexes = [
            models.Index(fields=['grade', 'group'], name='students_grade_group_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"
