from django.db import migrations

TEMPLATES = [
    ('absence', 'رسالة الغياب', 'تُرسل لولي الأمر عند غياب الطالب. المتغيرات: {studentName} {date}',
     'السلام عليكم ورحمة الله وبركاته\n\n'
     'نحيط علم سيادتكم أن الطالب/ة: {studentName}\n'
     'غاب/ت عن حصة يوم: {date}\n\n'
     'برجاء الاهتمام بالحضور المنتظم.\n\n'
     'مع تحيات مستر/ {teacherName}'),
    ('payment_reminder', 'تذكير بالدفع', 'تذكير بمصاريف الشهر. المتغيرات: {studentName} {month} {amount}',
     'السلام عليكم ورحمة الله وبركاته\n\n'
     'تذكير بسداد مصاريف شهر: {month}\n'
     'للطالب/ة: {studentName}\n'
     'المبلغ المطلوب: {amount} جنيه\n\n'
     'برجاء السداد في أقرب وقت.\n\n'
     'مع تحيات مستر/ {teacherName}'),
    ('exam_result', 'نتيجة امتحان',
     'المتغيرات: {studentName} {examName} {score} {maxScore} {percentage} {label}',
     'السلام عليكم ورحمة الله وبركاته\n\n'
     'نتيجة امتحان: {examName}\n'
     'الطالب/ة: {studentName}\n'
     'الدرجة: {score} من {maxScore}{labelSuffix}\n'
     'النسبة المئوية: {percentage}%\n\n'
     'مع تحيات مستر/ {teacherName}'),
]


def seed(apps, schema_editor):
    WhatsAppTemplate = apps.get_model('notifications', 'WhatsAppTemplate')
    for code, name, description, body in TEMPLATES:
        WhatsAppTemplate.objects.get_or_create(
            code=code,
            defaults={'name': name, 'description': description, 'template': body, 'target': 'parent'},
        )


class Migration(migrations.Migration):

    dependencies = [
        ('notifications', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, migrations.RunPython.noop),
    ]
