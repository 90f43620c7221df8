from django.db import migrations

RULES = [
    ('absent_2_consecutive', 'غياب حصتين متتاليتين', 'critical',
     'غياب الطالب حصتين متتاليتين أو أكثر قبل يوم التحضير.'),
    ('absent_3_month', 'غياب 3 حصص خلال الشهر', 'critical',
     'ثلاث غيابات أو أكثر خلال نفس الشهر.'),
    ('payment_1_5', 'الدفع مقدماً (1–5)', 'warning',
     'لم يتم تسجيل دفع الشهر خلال الأيام من 1 إلى 5.'),
    ('homework_required', 'الواجب غير محلول', 'warning',
     'غير مسموح بدخول الحصة بدون حل الواجب.'),
    ('performance_below_50', 'مستوى أقل من 50%', 'critical',
     'متوسط الشيتات والتسميع والامتحانات أقل من 50% خلال الشهر.'),
    ('exam_absence', 'يوجد امتحان اليوم', 'warning',
     'يوجد امتحان لسنة الطالب في يوم التحضير.'),
]


def seed(apps, schema_editor):
    AlertRule = apps.get_model('alerts', 'AlertRule')
    for code, title, severity, description in RULES:
        AlertRule.objects.get_or_create(
            code=code,
            defaults={'title': title, 'severity': severity, 'description': description, 'is_active': True},
        )


def unseed(apps, schema_editor):
    AlertRule = apps.get_model('alerts', 'AlertRule')
    AlertRule.objects.filter(code__in=[r[0] for r in RULES]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('alerts', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, unseed),
    ]
