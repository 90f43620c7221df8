"""
URLs for payments app
"""
from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('', views.payment_list_view, name='list'),
    path('register', views.register_view, name='register'),
    path('unpaid', views.unpaid_view, name='unpaid'),
    path('summary', views.summary_view, name='summary'),
    path('<uuid:pk>/refund', views.refund_view, name='refund'),
    path('<uuid:pk>/notified', views.mark_notified_view, name='notified'),
]
