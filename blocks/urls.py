"""
URLs for blocks app
"""
from django.urls import path
from . import views

app_name = 'blocks'

urlpatterns = [
    path('', views.block_list_view, name='list'),
    path('<uuid:block_id>', views.block_delete_view, name='delete'),
    path('students/<uuid:student_id>', views.student_blocks_view, name='student'),
    path('students/<uuid:student_id>/freeze', views.freeze_view, name='freeze'),
    path('students/<uuid:student_id>/unfreeze', views.unfreeze_view, name='unfreeze'),
]
