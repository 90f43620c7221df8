from django.contrib import admin
from .models import Lesson, LessonHomework, LessonRecitation, LessonSheet


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ['name', 'date', 'grade', 'group', 'sheet_max_score', 'recitation_max_score']
    list_filter = ['grade', 'group', 'date']
    search_fields = ['name']


@admin.register(LessonHomework)
class LessonHomeworkAdmin(admin.ModelAdmin):
    list_display = ['lesson', 'student', 'status', 'updated_at']
    list_filter = ['status']


admin.site.register(LessonSheet)
admin.site.register(LessonRecitation)
