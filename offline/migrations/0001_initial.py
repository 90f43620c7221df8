import django.core.serializers.json
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='OfflineOperation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('table', models.CharField(choices=[('attendance', 'Attendance'), ('payments', 'Payments'), ('exam_results', 'Exam results'), ('students', 'Students'), ('groups', 'Groups'), ('lessons', 'Lessons'), ('lesson_homework', 'Lesson homework'), ('lesson_recitations', 'Lesson recitations'), ('lesson_sheets', 'Lesson sheets')], max_length=50)),
                ('type', models.CharField(choices=[('insert', 'Insert'), ('update', 'Update'), ('delete', 'Delete')], max_length=10)),
                ('payload', models.JSONField(encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('synced', models.BooleanField(default=False)),
                ('attempts', models.PositiveIntegerField(default=0)),
                ('last_error', models.TextField(blank=True, default='')),
                ('last_attempt_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Offline Operation',
                'verbose_name_plural': 'Offline Operations',
                'db_table': 'offline_operations',
                'ordering': ['timestamp', 'id'],
                'indexes': [models.Index(fields=['synced', 'timestamp'], name='offline_ops_synced_ts_idx')],
            },
        ),
    ]
