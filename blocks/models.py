"""
Student blocks (freeze history).
At most one active block per student; inactive rows are the freeze/unfreeze history.
"""
import uuid

from django.db import models
from django.db.models import Q


class StudentBlock(models.Model):
    BLOCK_FREEZE = 'freeze'
    BLOCK_TYPE_CHOICES = [
        (BLOCK_FREEZE, 'Freeze'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='blocks',
    )
    is_active = models.BooleanField(default=True, db_index=True)
    block_type = models.CharField(max_length=20, choices=BLOCK_TYPE_CHOICES, default=BLOCK_FREEZE)
    reason = models.TextField(blank=True, null=True)
    triggered_by_rule_code = models.CharField(max_length=64, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'student_blocks'
        verbose_name = 'Student Block'
        verbose_name_plural = 'Student Blocks'
        ordering = ['-updated_at']
        constraints = [
            models.UniqueConstraint(
                fields=['student'],
                condition=Q(is_active=True),
                name='uniq_active_block_per_student',
            ),
        ]

    def __str__(self):
        state = 'active' if self.is_active else 'lifted'
        return f"{self.block_type} {self.student_id} ({state})"
