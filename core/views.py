"""
Application settings API.
- GET   /api/settings     list settings
- PATCH /api/settings     update settings (admin), reloads the app context
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status

from accounts.permissions import IsAdmin, IsStaffMember
from core.context import update_settings
from core.models import AppSetting
from core.serializers import AppSettingSerializer, AppSettingsUpdateSerializer


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsStaffMember])
def app_settings_view(request):
    if request.method == 'GET':
        return Response(AppSettingSerializer(AppSetting.objects.all(), many=True).data)

    if not IsAdmin().has_permission(request, None):
        return Response({"detail": "Admin access required"}, status=status.HTTP_403_FORBIDDEN)
    serializer = AppSettingsUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    ctx = update_settings({item['key']: item.get('value', '') for item in serializer.validated_data['settings']})
    return Response({
        'settings': AppSettingSerializer(AppSetting.objects.all(), many=True).data,
        'teacherName': ctx.teacher_name,
        'systemName': ctx.system_name,
    })
