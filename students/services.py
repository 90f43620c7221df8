"""
Student services: code generation and lookup.
"""
import logging
import secrets

from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import Student

logger = logging.getLogger(__name__)

CODE_PREFIX = 'ST'
MAX_CODE_ATTEMPTS = 10


def generate_code(today=None) -> str:
    """ST + two-digit year + four random digits, e.g. ST264821."""
    today = today or timezone.localdate()
    return f"{CODE_PREFIX}{today.strftime('%y')}{1000 + secrets.randbelow(9000)}"


def create_student(**fields) -> Student:
    """
    Create a student with a fresh unique code.
    Collisions on the code are retried; anything else propagates.
    """
    for attempt in range(MAX_CODE_ATTEMPTS):
        code = generate_code()
        if Student.objects.filter(code=code).exists():
            continue
        try:
            with transaction.atomic():
                student = Student.objects.create(code=code, **fields)
        except IntegrityError:
            if not Student.objects.filter(code=code).exists():
                raise
            logger.warning(f"[student] code collision on insert code={code} attempt={attempt + 1}")
            continue
        logger.info(f"[student] created id={student.id} code={student.code}")
        return student
    raise IntegrityError('Could not generate a unique student code.')


def get_by_code(code):
    """Lookup for QR scans and manual entry. Case and whitespace tolerant."""
    code = (code or '').strip().upper()
    if not code:
        return None
    return Student.objects.select_related('grade', 'group').filter(code=code).first()
