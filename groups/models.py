"""
Academic structure: grade levels and class groups.
Grade levels are keyed by a short stable code ('1', '2', '3') referenced by
students, exams and lessons.
"""
import uuid

from django.db import models

# date.weekday() order
WEEKDAYS = ['monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday']


class GradeLevel(models.Model):
    """Grade level (e.g. '1' = أولى ثانوي). Rows are data, not code."""
    code = models.CharField(max_length=20, primary_key=True)
    label = models.CharField(max_length=100)
    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'grade_levels'
        verbose_name = 'Grade Level'
        verbose_name_plural = 'Grade Levels'
        ordering = ['sort_order', 'code']

    def __str__(self):
        return self.label


class Group(models.Model):
    """
    Class group. days: list of weekday names (e.g. ["saturday", "tuesday"]);
    time: free text start time as entered ("4:00 PM");
    time_to: session end, after which check-in needs a staff decision.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    grade = models.ForeignKey(
        GradeLevel,
        on_delete=models.PROTECT,
        related_name='groups',
        db_column='grade',
    )
    days = models.JSONField(default=list, blank=True)
    time = models.CharField(max_length=50, blank=True, default='')
    time_to = models.TimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'groups'
        verbose_name = 'Group'
        verbose_name_plural = 'Groups'
        ordering = ['grade', 'name']

    def __str__(self):
        return self.name

    def meets_on(self, day) -> bool:
        """Groups without days meet any day."""
        return not self.days or WEEKDAYS[day.weekday()] in self.days

    @property
    def student_count(self):
        return self.students.count()
