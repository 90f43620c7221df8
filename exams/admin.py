from django.contrib import admin
from .models import Exam, ExamResult


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['name', 'date', 'grade', 'max_score']
    list_filter = ['grade', 'date']
    search_fields = ['name']


@admin.register(ExamResult)
class ExamResultAdmin(admin.ModelAdmin):
    list_display = ['exam', 'student', 'score', 'notified']
    list_filter = ['notified', 'exam__grade']
    search_fields = ['student__name', 'student__code', 'exam__name']
