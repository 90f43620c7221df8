"""
Attendance records: one row per (student, date).
"""
import uuid

from django.db import models


class AttendanceRecord(models.Model):
    """
    present: attended or not. notified: absence message already sent to the parent.
    checked_in_at: stamped when the record moves to present.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='attendance_records',
    )
    date = models.DateField(db_index=True)
    present = models.BooleanField(default=False)
    notified = models.BooleanField(default=False)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'attendance'
        verbose_name = 'Attendance Record'
        verbose_name_plural = 'Attendance Records'
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['student', 'date'], name='uniq_attendance_student_date'),
        ]

    def __str__(self):
        state = 'present' if self.present else 'absent'
        return f"{self.student_id} {self.date} {state}"
