"""
URLs for alerts app
"""
from django.urls import path
from . import views

app_name = 'alerts'

urlpatterns = [
    path('rules', views.rule_list_view, name='rules'),
    path('rules/<str:code>', views.rule_toggle_view, name='rule-toggle'),
    path('events', views.event_list_view, name='events'),
    path('events/<uuid:pk>/resolve', views.event_resolve_view, name='event-resolve'),
    path('events/<uuid:pk>/decision', views.event_decision_view, name='event-decision'),
    path('students/<uuid:student_id>/evaluate', views.student_evaluate_view, name='evaluate'),
]
