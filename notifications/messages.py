"""
Message composition for parent/student WhatsApp messages.

Bodies come from WhatsAppTemplate rows when an active row exists for the
code, otherwise from DEFAULT_TEMPLATES. The signature uses the teacher name
from the application context.
"""
import re
from decimal import Decimal

from .models import WhatsAppTemplate

ABSENCE = 'absence'
PAYMENT_REMINDER = 'payment_reminder'
EXAM_RESULT = 'exam_result'

ARABIC_WEEKDAYS = ['الاثنين', 'الثلاثاء', 'الأربعاء', 'الخميس', 'الجمعة', 'السبت', 'الأحد']
ARABIC_MONTHS = [
    'يناير', 'فبراير', 'مارس', 'أبريل', 'مايو', 'يونيو',
    'يوليو', 'أغسطس', 'سبتمبر', 'أكتوبر', 'نوفمبر', 'ديسمبر',
]

DEFAULT_TEMPLATES = {
    ABSENCE: (
        'السلام عليكم ورحمة الله وبركاته\n\n'
        'نحيط علم سيادتكم أن الطالب/ة: {studentName}\n'
        'غاب/ت عن حصة يوم: {date}\n\n'
        'برجاء الاهتمام بالحضور المنتظم.\n\n'
        'مع تحيات مستر/ {teacherName}'
    ),
    PAYMENT_REMINDER: (
        'السلام عليكم ورحمة الله وبركاته\n\n'
        'تذكير بسداد مصاريف شهر: {month}\n'
        'للطالب/ة: {studentName}\n'
        'المبلغ المطلوب: {amount} جنيه\n\n'
        'برجاء السداد في أقرب وقت.\n\n'
        'مع تحيات مستر/ {teacherName}'
    ),
    EXAM_RESULT: (
        'السلام عليكم ورحمة الله وبركاته\n\n'
        'نتيجة امتحان: {examName}\n'
        'الطالب/ة: {studentName}\n'
        'الدرجة: {score} من {maxScore}{labelSuffix}\n'
        'النسبة المئوية: {percentage}%\n\n'
        'مع تحيات مستر/ {teacherName}'
    ),
}

PLACEHOLDER_RE = re.compile(r'\{(\w+)\}')


def render(template, values) -> str:
    """Fill {placeholders}; unknown ones are left as written."""
    return PLACEHOLDER_RE.sub(lambda m: str(values.get(m.group(1), m.group(0))), template)


def get_template(code):
    """(body, target) for a message kind."""
    row = WhatsAppTemplate.objects.filter(code=code, is_active=True).first()
    if row is not None:
        return row.template, row.target
    return DEFAULT_TEMPLATES[code], WhatsAppTemplate.TARGET_PARENT


def format_arabic_date(day) -> str:
    return f"{ARABIC_WEEKDAYS[day.weekday()]} - {day.day}/{day.month}/{day.year}"


def month_label(month) -> str:
    year, month_no = month.split('-')
    return f"{ARABIC_MONTHS[int(month_no) - 1]} {year}"


def exam_label(percentage) -> str:
    if percentage >= 90:
        return 'ممتاز'
    if percentage >= 75:
        return 'جيد جداً'
    if percentage >= 60:
        return 'جيد'
    if percentage < 50:
        return 'يحتاج متابعة'
    return ''


def _number(value):
    value = Decimal(value)
    return int(value) if value == value.to_integral_value() else float(value)


def absence_message(context, student_name, day, template=None):
    template = template or get_template(ABSENCE)[0]
    return render(template, {
        'studentName': student_name,
        'date': format_arabic_date(day),
        'teacherName': context.teacher_name,
    })


def payment_reminder_message(context, student_name, month, amount, template=None):
    template = template or get_template(PAYMENT_REMINDER)[0]
    return render(template, {
        'studentName': student_name,
        'month': month_label(month),
        'amount': _number(amount),
        'teacherName': context.teacher_name,
    })


def exam_result_message(context, student_name, exam_name, score, max_score, template=None):
    template = template or get_template(EXAM_RESULT)[0]
    percentage = round(float(score) / float(max_score) * 100) if max_score else 0
    label = exam_label(percentage)
    return render(template, {
        'studentName': student_name,
        'examName': exam_name,
        'score': _number(score),
        'maxScore': _number(max_score),
        'percentage': percentage,
        'label': label,
        'labelSuffix': f' ({label})' if label else '',
        'teacherName': context.teacher_name,
    })
