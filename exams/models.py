"""
Exams and per-student results.
"""
import uuid

from django.db import models


class Exam(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    date = models.DateField(db_index=True)
    max_score = models.DecimalField(max_digits=6, decimal_places=2)
    grade = models.ForeignKey(
        'groups.GradeLevel',
        on_delete=models.PROTECT,
        related_name='exams',
        db_column='grade',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exams'
        verbose_name = 'Exam'
        verbose_name_plural = 'Exams'
        ordering = ['-date']

    def __str__(self):
        return f"{self.name} ({self.date})"


class ExamResult(models.Model):
    """One score per (exam, student); resubmission updates the row."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    exam = models.ForeignKey(Exam, on_delete=models.CASCADE, related_name='results')
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='exam_results',
    )
    score = models.DecimalField(max_digits=6, decimal_places=2)
    notified = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exam_results'
        verbose_name = 'Exam Result'
        verbose_name_plural = 'Exam Results'
        constraints = [
            models.UniqueConstraint(fields=['exam', 'student'], name='uniq_exam_result_student'),
        ]

    def __str__(self):
        return f"{self.exam_id} {self.student_id} {self.score}"

    @property
    def percentage(self):
        if not self.exam.max_score:
            return 0
        return round(float(self.score) / float(self.exam.max_score) * 100)
