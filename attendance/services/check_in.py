"""
Check-in flow for a scanned or selected student.

Order of gates:
1. frozen student -> blocked, nothing written
2. session of the student's group already ended -> session_ended
3. alert rules; when any fire the events are recorded -> alerts_pending
4. selected group is not the student's group -> different_group; with no
   group selected, the date is not one of the group's days -> different_day
5. attendance is marked present

Gates 2-4 write no attendance and are skipped with allow=True, after a staff
decision. Gate 1 is never skipped.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from django.utils import timezone

from alerts.rules import TriggeredAlert
from alerts.services import evaluate_student, record_alerts
from blocks.services import BlockStore
from .marking import MarkResult, mark_attendance

logger = logging.getLogger(__name__)

BLOCKED = 'blocked'
ALERTS_PENDING = 'alerts_pending'
SESSION_ENDED = 'session_ended'
DIFFERENT_GROUP = 'different_group'
DIFFERENT_DAY = 'different_day'
DECISION_REQUIRED = (SESSION_ENDED, ALERTS_PENDING, DIFFERENT_GROUP, DIFFERENT_DAY)

DEFAULT_BLOCK_REASON = 'الطالب محظور من دخول الحصة.'


@dataclass
class CheckInResult:
    status: str
    record: Optional[object] = None
    reason: str = ''
    alerts: List[TriggeredAlert] = field(default_factory=list)
    events: list = field(default_factory=list)
    context: dict = field(default_factory=dict)

    @classmethod
    def from_mark(cls, result: MarkResult):
        return cls(status=result.status, record=result.record)


def session_has_ended(group, date, now=None) -> bool:
    if group is None or group.time_to is None:
        return False
    now = timezone.localtime(now or timezone.now())
    end = timezone.make_aware(datetime.combine(date, group.time_to), timezone.get_current_timezone())
    return now > end


def _group_gate(student, date, selected_group):
    group = student.group
    if selected_group is not None:
        selected_id = str(getattr(selected_group, 'pk', selected_group))
        if str(student.group_id) != selected_id:
            return CheckInResult(
                status=DIFFERENT_GROUP,
                reason='الطالب ليس من طلاب المجموعة المختارة.',
                context={'studentGroup': group.name if group else None, 'selectedGroup': selected_id},
            )
        return None
    if group is not None and not group.meets_on(date):
        return CheckInResult(
            status=DIFFERENT_DAY,
            reason='اليوم ليس من أيام مجموعة الطالب.',
            context={'studentGroup': group.name, 'days': list(group.days)},
        )
    return None


def check_in(student, date, allow=False, selected_group=None, blocks=None, now=None) -> CheckInResult:
    blocks = blocks or BlockStore.load()
    outcome = blocks.check(student)
    if outcome is not None:
        logger.info(f"[check-in] blocked student={student.pk} date={date}")
        return CheckInResult(status=BLOCKED, reason=outcome.reason or DEFAULT_BLOCK_REASON)

    if not allow:
        group = student.group
        if session_has_ended(group, date, now=now):
            logger.info(f"[check-in] session ended student={student.pk} group={group.pk} date={date}")
            return CheckInResult(
                status=SESSION_ENDED,
                reason=f'انتهت حصة مجموعة {group.name} الساعة {group.time_to:%H:%M}.',
                context={'groupName': group.name, 'endTime': group.time_to.strftime('%H:%M')},
            )

        alerts = evaluate_student(student, date, now=now)
        if alerts:
            events = record_alerts(student, alerts, date)
            logger.info(
                f"[check-in] alerts pending student={student.pk} date={date} "
                f"rules={','.join(a.rule_code for a in alerts)}"
            )
            return CheckInResult(status=ALERTS_PENDING, alerts=alerts, events=events)

        gated = _group_gate(student, date, selected_group)
        if gated is not None:
            logger.info(f"[check-in] {gated.status} student={student.pk} date={date}")
            return gated

    return CheckInResult.from_mark(mark_attendance(student, date, True, now=now))
