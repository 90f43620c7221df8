"""
Monthly tuition payments. One row per (student, month).
A month is unpaid when there is no row or paid=False (after a refund).
"""
import uuid

from django.db import models


class Payment(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='payments',
    )
    month = models.CharField(max_length=7, help_text="YYYY-MM")
    amount = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    notified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        verbose_name = 'Payment'
        verbose_name_plural = 'Payments'
        ordering = ['-month', 'student__name']
        constraints = [
            models.UniqueConstraint(fields=['student', 'month'], name='uniq_payment_student_month'),
        ]
        indexes = [
            models.Index(fields=['month', 'paid'], name='payments_month_paid_idx'),
        ]

    def __str__(self):
        state = 'paid' if self.paid else 'unpaid'
        return f"{self.student_id} {self.month} {state}"
