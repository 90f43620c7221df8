from django.db import migrations

GRADE_LEVELS = [
    ('1', 'أولى ثانوي', 1),
    ('2', 'تانية ثانوي', 2),
    ('3', 'تالتة ثانوي', 3),
]


def seed(apps, schema_editor):
    GradeLevel = apps.get_model('groups', 'GradeLevel')
    for code, label, order in GRADE_LEVELS:
        GradeLevel.objects.get_or_create(code=code, defaults={'label': label, 'sort_order': order})


class Migration(migrations.Migration):

    dependencies = [
        ('groups', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed, migrations.RunPython.noop),
    ]
