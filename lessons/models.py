"""
Lessons and per-student lesson grades: sheet score, recitation score and
homework status. Each grade row is unique per (lesson, student).
"""
import uuid

from django.db import models


class Lesson(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    date = models.DateField(db_index=True)
    grade = models.ForeignKey(
        'groups.GradeLevel',
        on_delete=models.PROTECT,
        related_name='lessons',
        db_column='grade',
    )
    group = models.ForeignKey(
        'groups.Group',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='lessons',
    )
    sheet_max_score = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    recitation_max_score = models.DecimalField(max_digits=6, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'lessons'
        verbose_name = 'Lesson'
        verbose_name_plural = 'Lessons'
        ordering = ['-date']

    def __str__(self):
        return f"{self.name} ({self.date})"


class LessonSheet(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='sheets')
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='lesson_sheets')
    score = models.DecimalField(max_digits=6, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'lesson_sheets'
        constraints = [
            models.UniqueConstraint(fields=['lesson', 'student'], name='uniq_lesson_sheet_student'),
        ]


class LessonRecitation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='recitations')
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='lesson_recitations')
    score = models.DecimalField(max_digits=6, decimal_places=2)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'lesson_recitations'
        constraints = [
            models.UniqueConstraint(fields=['lesson', 'student'], name='uniq_lesson_recitation_student'),
        ]


class LessonHomework(models.Model):
    STATUS_DONE = 'done'
    STATUS_NOT_DONE = 'not_done'
    STATUS_CHOICES = [
        (STATUS_DONE, 'Done'),
        (STATUS_NOT_DONE, 'Not done'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    lesson = models.ForeignKey(Lesson, on_delete=models.CASCADE, related_name='homework')
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='lesson_homework')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES)
    note = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'lesson_homework'
        constraints = [
            models.UniqueConstraint(fields=['lesson', 'student'], name='uniq_lesson_homework_student'),
        ]
