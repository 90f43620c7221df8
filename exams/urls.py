"""
URLs for exams app
"""
from django.urls import path
from . import views

app_name = 'exams'

urlpatterns = [
    path('', views.exam_list_view, name='list'),
    path('<uuid:pk>', views.exam_detail_view, name='detail'),
    path('<uuid:pk>/results', views.exam_results_view, name='results'),
    path('results/<uuid:pk>/notified', views.result_notified_view, name='result-notified'),
]
