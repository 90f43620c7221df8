from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('groups', '0001_initial'),
        ('students', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Lesson',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('date', models.DateField(db_index=True)),
                ('sheet_max_score', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('recitation_max_score', models.DecimalField(decimal_places=2, default=0, max_digits=6)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('grade', models.ForeignKey(db_column='grade', on_delete=django.db.models.deletion.PROTECT, related_name='lessons', to='groups.gradelevel')),
                ('group', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lessons', to='groups.group')),
            ],
            options={
                'verbose_name': 'Lesson',
                'verbose_name_plural': 'Lessons',
                'db_table': 'lessons',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='LessonSheet',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('score', models.DecimalField(decimal_places=2, max_digits=6)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('lesson', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sheets', to='lessons.lesson')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lesson_sheets', to='students.student')),
            ],
            options={
                'db_table': 'lesson_sheets',
                'constraints': [models.UniqueConstraint(fields=('lesson', 'student'), name='uniq_lesson_sheet_student')],
            },
        ),
        migrations.CreateModel(
            name='LessonRecitation',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('score', models.DecimalField(decimal_places=2, max_digits=6)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('lesson', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='recitations', to='lessons.lesson')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lesson_recitations', to='students.student')),
            ],
            options={
                'db_table': 'lesson_recitations',
                'constraints': [models.UniqueConstraint(fields=('lesson', 'student'), name='uniq_lesson_recitation_student')],
            },
        ),
        migrations.CreateModel(
            name='LessonHomework',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=[('done', 'Done'), ('not_done', 'Not done')], max_length=20)),
                ('note', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('lesson', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='homework', to='lessons.lesson')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lesson_homework', to='students.student')),
            ],
            options={
                'db_table': 'lesson_homework',
                'constraints': [models.UniqueConstraint(fields=('lesson', 'student'), name='uniq_lesson_homework_student')],
            },
        ),
    ]
