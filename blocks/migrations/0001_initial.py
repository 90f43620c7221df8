from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='StudentBlock',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('block_type', models.CharField(choices=[('freeze', 'Freeze')], default='freeze', max_length=20)),
                ('reason', models.TextField(blank=True, null=True)),
                ('triggered_by_rule_code', models.CharField(blank=True, max_length=64, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='blocks', to='students.student')),
            ],
            options={
                'verbose_name': 'Student Block',
                'verbose_name_plural': 'Student Blocks',
                'db_table': 'student_blocks',
                'ordering': ['-updated_at'],
                'constraints': [models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('student',), name='uniq_active_block_per_student')],
            },
        ),
    ]
