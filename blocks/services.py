"""
Block store: freeze/unfreeze and block lookups.

A BlockStore holds the active blocks of every student, keyed by student id,
loaded from the database and refreshed after each mutation. Payment, grading
and check-in paths consult it before writing and return a BlockedOutcome
instead of writing when the student is frozen.
"""
import logging
from dataclasses import dataclass

from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import StudentBlock

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockedOutcome:
    student_id: str
    reason: str

    @classmethod
    def from_block(cls, block):
        return cls(student_id=str(block.student_id), reason=block.reason or '')


def _student_key(student):
    return str(getattr(student, 'pk', student))


class BlockStore:
    """Active blocks keyed by student id."""

    def __init__(self):
        self._active_by_student = {}
        self.refresh()

    @classmethod
    def load(cls):
        return cls()

    def refresh(self):
        self._active_by_student = {
            str(block.student_id): block
            for block in StudentBlock.objects.filter(is_active=True)
        }

    def active_blocks(self):
        return list(self._active_by_student.values())

    def get_active_block(self, student):
        return self._active_by_student.get(_student_key(student))

    def is_blocked(self, student) -> bool:
        return _student_key(student) in self._active_by_student

    def check(self, student):
        """BlockedOutcome when the student is frozen, else None."""
        block = self.get_active_block(student)
        if block is None:
            return None
        return BlockedOutcome.from_block(block)

    def freeze(self, student, reason, triggered_by_rule_code=None) -> StudentBlock:
        """
        Freeze a student. An existing active block is updated in place;
        otherwise a new active block is inserted. A concurrent insert losing
        the unique-active race falls back to updating the winner's row.
        """
        student_id = _student_key(student)
        fields = {
            'block_type': StudentBlock.BLOCK_FREEZE,
            'reason': reason,
            'triggered_by_rule_code': triggered_by_rule_code,
        }
        try:
            block = self._upsert_active(student_id, fields)
        except IntegrityError:
            logger.warning(f"[block] concurrent freeze for student={student_id}, updating existing block")
            block = self._upsert_active(student_id, fields)
        self.refresh()
        logger.info(
            f"[block] freeze student={student_id} rule={triggered_by_rule_code or '-'} block={block.id}"
        )
        return block

    def _upsert_active(self, student_id, fields):
        with transaction.atomic():
            block = (
                StudentBlock.objects.select_for_update()
                .filter(student_id=student_id, is_active=True)
                .first()
            )
            if block is None:
                return StudentBlock.objects.create(student_id=student_id, is_active=True, **fields)
            for name, value in fields.items():
                setattr(block, name, value)
            block.save(update_fields=list(fields) + ['updated_at'])
            return block

    def unfreeze(self, student) -> bool:
        """Lift the active block. Returns False when there was nothing to lift."""
        student_id = _student_key(student)
        with transaction.atomic():
            updated = StudentBlock.objects.filter(student_id=student_id, is_active=True).update(
                is_active=False, updated_at=timezone.now()
            )
        self.refresh()
        if updated:
            logger.info(f"[block] unfreeze student={student_id}")
        return bool(updated)

    def history(self, student):
        return list(StudentBlock.objects.filter(student_id=_student_key(student)).order_by('-created_at'))

    def delete_history_entry(self, block_id) -> bool:
        """Remove one historical (inactive) row. Active blocks are never deleted here."""
        deleted, _ = StudentBlock.objects.filter(pk=block_id, is_active=False).delete()
        if deleted:
            logger.info(f"[block] history entry deleted id={block_id}")
        return bool(deleted)
