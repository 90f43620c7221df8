"""
URLs for notifications app.
"""
from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('whatsapp/absence/<uuid:attendance_id>', views.absence_link_view, name='whatsapp-absence'),
    path('whatsapp/payment', views.payment_link_view, name='whatsapp-payment'),
    path('whatsapp/exam-result/<uuid:result_id>', views.exam_result_link_view, name='whatsapp-exam-result'),
    path('templates', views.template_list_view, name='templates'),
    path('templates/<str:code>', views.template_update_view, name='template-update'),
    path('tokens', views.register_token_view, name='tokens'),
    path('push', views.push_view, name='push'),
]
