"""
Groups API
GET/POST /api/groups/grade-levels
GET/POST /api/groups/
GET/PATCH/DELETE /api/groups/<id>
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from .models import GradeLevel, Group
from .serializers import GradeLevelSerializer, GroupSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def grade_levels_view(request):
    """
    GET: list grade levels (?active=1 for active only)
    POST: create grade level (admin only)
    """
    if request.method == 'GET':
        qs = GradeLevel.objects.all()
        if request.query_params.get('active') in ('1', 'true'):
            qs = qs.filter(is_active=True)
        return Response(GradeLevelSerializer(qs, many=True).data)

    if not IsAdmin().has_permission(request, None):
        return Response({'detail': 'Only admins can add grade levels.'}, status=status.HTTP_403_FORBIDDEN)
    serializer = GradeLevelSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def group_list_view(request):
    """
    GET: list groups (?grade=<code>)
    POST: create group
    """
    if request.method == 'GET':
        qs = Group.objects.select_related('grade')
        grade = request.query_params.get('grade')
        if grade:
            qs = qs.filter(grade_id=grade)
        return Response(GroupSerializer(qs, many=True).data)

    serializer = GroupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    group = serializer.save()
    logger.info(f"[group] created id={group.id} grade={group.grade_id}")
    return Response(GroupSerializer(group).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffMember])
def group_detail_view(request, pk):
    try:
        group = Group.objects.get(pk=pk)
    except Group.DoesNotExist:
        return Response({'detail': 'Group not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(GroupSerializer(group).data)

    if request.method == 'PATCH':
        serializer = GroupSerializer(group, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    # Students keep their record, only the membership is cleared
    group.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
