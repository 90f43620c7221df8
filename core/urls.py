"""
URLs for core app
"""
from django.urls import path
from core.views import app_settings_view

urlpatterns = [
    path('', app_settings_view, name='app-settings'),
]
