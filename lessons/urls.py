"""
URLs for lessons app
"""
from django.urls import path
from . import views

app_name = 'lessons'

urlpatterns = [
    path('', views.lesson_list_view, name='list'),
    path('<uuid:pk>', views.lesson_detail_view, name='detail'),
    path('<uuid:pk>/grades', views.lesson_grades_view, name='grades'),
    path('students/<uuid:student_id>/performance', views.student_performance_view, name='performance'),
]
