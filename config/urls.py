"""
URL configuration for the tutoring center backend
"""
from django.contrib import admin
from django.db import connections
from django.urls import path, include
from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from django.views.generic import RedirectView
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularSwaggerView,
    SpectacularRedocView,
)


@require_http_methods(["GET"])
def health_view(request):
    """Minimal health check for connectivity verification. No auth required."""
    return JsonResponse({'status': 'ok', 'service': 'tutoring-center-back'})


@require_http_methods(["GET"])
def system_health_view(request):
    """
    Full system health check for monitoring.
    Returns primary db, offline queue and pending count. No auth required.
    """
    result = {'db': 'ok', 'offline_queue': 'ok', 'pending': None}
    try:
        connections['default'].ensure_connection()
    except Exception as e:
        result['db'] = f'error: {str(e)[:80]}'
    try:
        from offline.models import OfflineOperation
        result['pending'] = OfflineOperation.objects.using('offline').filter(synced=False).count()
    except Exception as e:
        result['offline_queue'] = f'error: {str(e)[:80]}'
    return JsonResponse(result)


@require_http_methods(["GET"])
def api_root(request):
    """Root endpoint - API information"""
    return JsonResponse({
        'name': 'Tutoring Center API',
        'version': '1.0.0',
        'description': 'إدارة السنتر: الحضور والمدفوعات والدرجات والتنبيهات',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'students': '/api/students/',
            'attendance': '/api/attendance/',
            'payments': '/api/payments/',
            'alerts': '/api/alerts/',
            'offline': '/api/offline/',
            'docs': '/api/docs/',
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    path('', api_root, name='api-root'),
    path('admin', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api', RedirectView.as_view(url='/api/', permanent=False)),
    path('api/', api_root),
    path('api/health/', health_view, name='api-health'),
    path('api/system/health/', system_health_view, name='api-system-health'),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # API endpoints
    path('api/auth/', include('accounts.urls')),
    path('api/settings/', include('core.urls')),
    path('api/groups/', include('groups.urls')),
    path('api/students/', include('students.urls')),
    path('api/attendance/', include('attendance.urls')),
    path('api/payments/', include('payments.urls')),
    path('api/exams/', include('exams.urls')),
    path('api/lessons/', include('lessons.urls')),
    path('api/alerts/', include('alerts.urls')),
    path('api/blocks/', include('blocks.urls')),
    path('api/notifications/', include('notifications.urls')),
    path('api/offline/', include('offline.urls')),
]
