"""
URLs for attendance app
"""
from django.urls import path
from . import views

app_name = 'attendance'

urlpatterns = [
    path('mark', views.mark_view, name='mark'),
    path('scan', views.scan_view, name='scan'),
    path('daily', views.daily_view, name='daily'),
    path('absences', views.absences_view, name='absences'),
    path('<uuid:pk>/notified', views.mark_notified_view, name='notified'),
    path('students/<uuid:student_id>/stats', views.student_stats_view, name='student-stats'),
]
