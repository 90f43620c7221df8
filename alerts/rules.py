"""
Alert rules.

Each rule is registered with its code, title and severity next to the
predicate that decides whether it fires. RuleRegistry.evaluate runs every
registered rule over one AlertFacts snapshot, skipping codes switched off in
the active flag map. Evaluation is pure: nothing here touches the database.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from django.utils import timezone

from .models import SEVERITY_CRITICAL, SEVERITY_WARNING

ABSENT_2_CONSECUTIVE = 'absent_2_consecutive'
ABSENT_3_MONTH = 'absent_3_month'
PAYMENT_1_5 = 'payment_1_5'
HOMEWORK_REQUIRED = 'homework_required'
PERFORMANCE_BELOW_50 = 'performance_below_50'
EXAM_ABSENCE = 'exam_absence'

HOMEWORK_NOT_DONE = 'not_done'


@dataclass
class AlertFacts:
    """Everything the rules need about one student on one date."""
    student: object
    evaluation_date: date
    now: datetime
    attendance: list
    is_month_paid: bool
    exams: list = field(default_factory=list)
    homework_status: Optional[str] = None
    performance_below_50: bool = False


@dataclass
class TriggeredAlert:
    rule_code: str
    title: str
    message: str
    severity: str
    context: dict = field(default_factory=dict)


def month_of(day) -> str:
    return day.strftime('%Y-%m')


def consecutive_absence_count(attendance, up_to) -> int:
    """Run of absences ending at the most recent record strictly before up_to."""
    earlier = sorted((a for a in attendance if a.date < up_to), key=lambda a: a.date, reverse=True)
    count = 0
    for record in earlier:
        if record.present:
            break
        count += 1
    return count


def monthly_absence_count(attendance, month) -> int:
    return sum(1 for a in attendance if not a.present and month_of(a.date) == month)


def _local(now):
    if timezone.is_aware(now):
        return timezone.localtime(now)
    return now


def should_warn_payment_window(now, is_month_paid) -> bool:
    return 1 <= _local(now).day <= 5 and not is_month_paid


def has_exam_on_date(exams, student, day) -> bool:
    return any(e.date == day and e.grade_id == student.grade_id for e in exams)


@dataclass(frozen=True)
class Rule:
    code: str
    title: str
    severity: str
    check: Callable[[AlertFacts], Optional[tuple]]


class RuleRegistry:
    def __init__(self):
        self._rules: Dict[str, Rule] = {}

    def register(self, code, title, severity):
        """Decorator: the wrapped function returns None or (message, context)."""
        def decorator(func):
            self._rules[code] = Rule(code, title, severity, func)
            return func
        return decorator

    def codes(self) -> List[str]:
        return list(self._rules)

    def get(self, code) -> Optional[Rule]:
        return self._rules.get(code)

    def evaluate(self, facts: AlertFacts, active=None) -> List[TriggeredAlert]:
        """
        active: {code: is_active}. Codes missing from the map count as active.
        """
        active = active or {}
        alerts = []
        for rule in self._rules.values():
            if not active.get(rule.code, True):
                continue
            hit = rule.check(facts)
            if hit is None:
                continue
            message, context = hit
            alerts.append(TriggeredAlert(rule.code, rule.title, message, rule.severity, context))
        return alerts


registry = RuleRegistry()


@registry.register(ABSENT_2_CONSECUTIVE, 'غياب حصتين متتاليتين', SEVERITY_CRITICAL)
def _absent_two_consecutive(facts):
    count = consecutive_absence_count(facts.attendance, facts.evaluation_date)
    if count < 2:
        return None
    return (
        f'تنبيه: الطالب غائب {count} حصص متتالية. اتخاذ الإجراء (السماح بالدخول أو التجميد).',
        {'consecutiveAbsences': count},
    )


@registry.register(ABSENT_3_MONTH, 'غياب 3 حصص خلال الشهر', SEVERITY_CRITICAL)
def _absent_three_in_month(facts):
    month = month_of(facts.evaluation_date)
    count = monthly_absence_count(facts.attendance, month)
    if count < 3:
        return None
    return (
        f'تنبيه: الطالب غائب {count} حصص خلال شهر {month}. اتخاذ الإجراء (السماح بالدخول أو التجميد).',
        {'monthAbsences': count, 'month': month},
    )


@registry.register(PAYMENT_1_5, 'الدفع مقدماً (1–5)', SEVERITY_WARNING)
def _payment_window(facts):
    if not should_warn_payment_window(facts.now, facts.is_month_paid):
        return None
    return (
        'تنبيه: لم يتم تسجيل دفع الشهر الحالي (خلال الفترة 1–5). اتخاذ الإجراء (السماح أو التجميد).',
        {'month': month_of(_local(facts.now))},
    )


@registry.register(HOMEWORK_REQUIRED, 'الواجب غير محلول', SEVERITY_WARNING)
def _homework_required(facts):
    if facts.homework_status != HOMEWORK_NOT_DONE:
        return None
    return ('تنبيه: غير مسموح بدخول الحصة بدون حل الواجب. اتخاذ الإجراء (السماح أو التجميد).', {})


@registry.register(PERFORMANCE_BELOW_50, 'مستوى أقل من 50%', SEVERITY_CRITICAL)
def _performance_below_50(facts):
    if not facts.performance_below_50:
        return None
    return ('تنبيه: متوسط مستوى الطالب أقل من 50% خلال الشهر. اتخاذ الإجراء (السماح أو التجميد).', {})


@registry.register(EXAM_ABSENCE, 'يوجد امتحان اليوم', SEVERITY_WARNING)
def _exam_today(facts):
    # Informational only; consequences of missing the exam are decided by staff
    if not has_exam_on_date(facts.exams, facts.student, facts.evaluation_date):
        return None
    return ('تنبيه: اليوم يوجد امتحان لهذه السنة. في حالة الغياب عن الامتحان قد يلزم اتخاذ إجراء.', {})
