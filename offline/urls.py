"""
URLs for offline app
"""
from django.urls import path
from . import views

app_name = 'offline'

urlpatterns = [
    path('status', views.status_view, name='status'),
    path('sync', views.sync_view, name='sync'),
    path('probe', views.probe_view, name='probe'),
    path('operations', views.operations_view, name='operations'),
    path('operations/<int:pk>', views.operation_discard_view, name='operation-discard'),
    path('operations/<int:pk>/retry', views.operation_retry_view, name='operation-retry'),
]
