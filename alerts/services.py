"""
Alert services: rule switches, evaluation, event persistence and decisions.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import DatabaseError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date

from attendance.services.marking import mark_attendance
from blocks.services import BlockStore
from .facts import collect_facts
from .models import SEVERITY_INFO, AlertEvent, AlertRule
from .rules import registry

logger = logging.getLogger(__name__)

DECISION_ALLOW = 'allow'
DECISION_FREEZE = 'freeze'
DEFAULT_FREEZE_REASON = 'قرار: تجميد كامل بعد تنبيه أثناء التحضير'


def active_rule_flags() -> dict:
    return dict(AlertRule.objects.values_list('code', 'is_active'))


def set_rule_active(code, is_active) -> AlertRule:
    rule = AlertRule.objects.get(code=code)
    rule.is_active = is_active
    rule.save(update_fields=['is_active', 'updated_at'])
    logger.info(f"[alerts] rule {code} is_active={is_active}")
    return rule


def evaluate_student(student, evaluation_date, now=None):
    facts = collect_facts(student, evaluation_date, now=now)
    return registry.evaluate(facts, active=active_rule_flags())


def create_event(student, rule_code, title, message, severity, context=None) -> AlertEvent:
    return AlertEvent.objects.create(
        student=student,
        rule_code=rule_code,
        title=title,
        message=message,
        severity=severity,
        context=context or {},
    )


def resolve_event(event_id) -> AlertEvent:
    """open -> resolved. Resolving twice keeps the first resolved_at."""
    AlertEvent.objects.filter(pk=event_id, status=AlertEvent.STATUS_OPEN).update(
        status=AlertEvent.STATUS_RESOLVED,
        resolved_at=timezone.now(),
    )
    return AlertEvent.objects.get(pk=event_id)


def record_alerts(student, alerts, evaluation_date):
    """
    Persist triggered alerts as open events. Persistence is best-effort: a
    failed insert is logged and the remaining alerts are still recorded.
    """
    events = []
    for alert in alerts:
        context = {'selectedDate': evaluation_date.isoformat(), **alert.context}
        try:
            with transaction.atomic():
                event = create_event(student, alert.rule_code, alert.title, alert.message, alert.severity, context)
        except DatabaseError:
            logger.error(
                f"[alerts] could not record {alert.rule_code} for student={student.pk}",
                exc_info=True,
            )
            continue
        events.append(event)
    return events


def record_decision(student, rule_code, title, message, context=None) -> AlertEvent:
    """Audit row for a staff decision; created already resolved."""
    event = create_event(student, rule_code, title, message, SEVERITY_INFO, context)
    return resolve_event(event.pk)


class EventAlreadyResolved(Exception):
    pass


@dataclass
class DecisionResult:
    decision: str
    event: AlertEvent
    block: Optional[object] = None


def apply_decision(event, decision, reason=None, blocks=None) -> DecisionResult:
    """
    allow: resolve the event; the caller retries check-in with allow=True.
    freeze: freeze the student with the event's rule as trigger, mark the
    student absent for the event's date and resolve the event.
    Raises EventAlreadyResolved when the event was decided before; nothing is
    written in that case.
    """
    if decision not in (DECISION_ALLOW, DECISION_FREEZE):
        raise ValueError(f"Unknown decision: {decision}")

    with transaction.atomic():
        return _apply_decision(event, decision, reason, blocks)


def _apply_decision(event, decision, reason, blocks) -> DecisionResult:
    # resolved first, so of two concurrent decisions only one gets past here
    resolved = AlertEvent.objects.filter(pk=event.pk, status=AlertEvent.STATUS_OPEN).update(
        status=AlertEvent.STATUS_RESOLVED,
        resolved_at=timezone.now(),
    )
    if not resolved:
        raise EventAlreadyResolved(f"Event {event.pk} is already resolved")

    student = event.student
    block = None
    if decision == DECISION_FREEZE:
        blocks = blocks or BlockStore.load()
        block = blocks.freeze(student, reason or DEFAULT_FREEZE_REASON, triggered_by_rule_code=event.rule_code)
        day = parse_date(event.context.get('selectedDate') or '')
        if day is not None:
            mark_attendance(student, day, False)
        record_decision(
            student,
            'decision_freeze',
            'قرار: تجميد كامل',
            'تم اتخاذ قرار تجميد كامل من شاشة التنبيهات.',
            {'event_id': str(event.pk)},
        )
    else:
        record_decision(
            student,
            'decision_allow',
            'قرار: السماح بالدخول',
            'تم السماح بدخول الحصة رغم التنبيه.',
            {'event_id': str(event.pk)},
        )

    event = AlertEvent.objects.get(pk=event.pk)
    logger.info(f"[alerts] decision={decision} event={event.pk} student={student.pk}")
    return DecisionResult(decision, event, block)
