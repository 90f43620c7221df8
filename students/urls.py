"""
URLs for students app
"""
from django.urls import path
from . import views

app_name = 'students'

urlpatterns = [
    path('', views.student_list_view, name='list'),
    path('<uuid:pk>', views.student_detail_view, name='detail'),
    path('by-code/<str:code>', views.student_by_code_view, name='by-code'),
]
