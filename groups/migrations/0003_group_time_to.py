from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('groups', '0002_seed_grade_levels'),
    ]

    operations = [
        migrations.AddField(
            model_name='group',
            name='time_to',
            field=models.TimeField(blank=True, null=True),
        ),
    ]
