"""
Entity kinds the offline queue can carry, each bound to one model and one
handler. A table name outside EntityKind is rejected with ValueError.
"""
from functools import cached_property

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist
from django.db import models
from django.utils import timezone


class EntityKind(models.TextChoices):
    ATTENDANCE = 'attendance', 'Attendance'
    PAYMENTS = 'payments', 'Payments'
    EXAM_RESULTS = 'exam_results', 'Exam results'
    STUDENTS = 'students', 'Students'
    GROUPS = 'groups', 'Groups'
    LESSONS = 'lessons', 'Lessons'
    LESSON_HOMEWORK = 'lesson_homework', 'Lesson homework'
    LESSON_RECITATIONS = 'lesson_recitations', 'Lesson recitations'
    LESSON_SHEETS = 'lesson_sheets', 'Lesson sheets'


class OperationType(models.TextChoices):
    INSERT = 'insert', 'Insert'
    UPDATE = 'update', 'Update'
    DELETE = 'delete', 'Delete'


MODEL_LABELS = {
    EntityKind.ATTENDANCE: 'attendance.AttendanceRecord',
    EntityKind.PAYMENTS: 'payments.Payment',
    EntityKind.EXAM_RESULTS: 'exams.ExamResult',
    EntityKind.STUDENTS: 'students.Student',
    EntityKind.GROUPS: 'groups.Group',
    EntityKind.LESSONS: 'lessons.Lesson',
    EntityKind.LESSON_HOMEWORK: 'lessons.LessonHomework',
    EntityKind.LESSON_RECITATIONS: 'lessons.LessonRecitation',
    EntityKind.LESSON_SHEETS: 'lessons.LessonSheet',
}


class EntityNotFound(Exception):
    """An update targeted a row that does not exist in the primary store."""


class EntityHandler:
    """insert / update / delete of one entity kind against the primary store."""

    def __init__(self, kind, model_label):
        self.kind = kind
        self.model_label = model_label

    @cached_property
    def model(self):
        return apps.get_model(self.model_label)

    def _normalize(self, payload):
        """Foreign keys may arrive by name ('student') or attname ('student_id')."""
        data = {}
        for key, value in payload.items():
            try:
                field = self.model._meta.get_field(key)
            except FieldDoesNotExist:
                data[key] = value
                continue
            data[getattr(field, 'attname', key)] = value
        return data

    def insert(self, payload, using='default'):
        obj = self.model._default_manager.db_manager(using).create(**self._normalize(payload))
        return obj.pk

    def update(self, payload, using='default'):
        data = self._normalize(payload)
        pk = data.pop('id')
        field_names = {f.name for f in self.model._meta.concrete_fields}
        if 'updated_at' in field_names and 'updated_at' not in data:
            data['updated_at'] = timezone.now()
        updated = self.model._default_manager.db_manager(using).filter(pk=pk).update(**data)
        if not updated:
            raise EntityNotFound(f"{self.kind} {pk} does not exist")
        return pk

    def delete(self, payload, using='default'):
        pk = payload['id']
        self.model._default_manager.db_manager(using).filter(pk=pk).delete()
        return pk

    def apply(self, op_type, payload, using='default'):
        return getattr(self, OperationType(op_type).value)(payload, using=using)


HANDLERS = {kind: EntityHandler(kind, label) for kind, label in MODEL_LABELS.items()}


def get_kind(table) -> EntityKind:
    try:
        return EntityKind(table)
    except ValueError:
        raise ValueError(f"Unsupported table for offline operations: {table!r}") from None


def handler_for(table) -> EntityHandler:
    return HANDLERS[get_kind(table)]
