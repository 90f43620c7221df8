"""
URLs for groups app
"""
from django.urls import path
from . import views

app_name = 'groups'

urlpatterns = [
    path('grade-levels', views.grade_levels_view, name='grade-levels'),
    path('', views.group_list_view, name='list'),
    path('<uuid:pk>', views.group_detail_view, name='detail'),
]
