"""
Student blocks API
GET /api/blocks/?active=1
GET /api/blocks/students/<student_id>
POST /api/blocks/students/<student_id>/freeze
POST /api/blocks/students/<student_id>/unfreeze
DELETE /api/blocks/<block_id> (admin, history rows only)
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from students.models import Student
from .models import StudentBlock
from .serializers import FreezeSerializer, StudentBlockSerializer
from .services import BlockStore


def _get_student(pk):
    try:
        return Student.objects.get(pk=pk)
    except Student.DoesNotExist:
        return None


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def block_list_view(request):
    qs = StudentBlock.objects.select_related('student')
    if request.query_params.get('active') in ('1', 'true'):
        qs = qs.filter(is_active=True)
    return Response(StudentBlockSerializer(qs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_blocks_view(request, student_id):
    """Current state and full freeze history of one student."""
    student = _get_student(student_id)
    if student is None:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    store = BlockStore.load()
    active = store.get_active_block(student)
    return Response({
        'isBlocked': active is not None,
        'activeBlock': StudentBlockSerializer(active).data if active else None,
        'history': StudentBlockSerializer(store.history(student), many=True).data,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def freeze_view(request, student_id):
    student = _get_student(student_id)
    if student is None:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    serializer = FreezeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    block = BlockStore.load().freeze(
        student,
        serializer.validated_data['reason'],
        serializer.validated_data.get('triggered_by_rule_code') or None,
    )
    return Response(StudentBlockSerializer(block).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def unfreeze_view(request, student_id):
    student = _get_student(student_id)
    if student is None:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    lifted = BlockStore.load().unfreeze(student)
    return Response({'unfrozen': lifted}, status=status.HTTP_200_OK)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def block_delete_view(request, block_id):
    if StudentBlock.objects.filter(pk=block_id, is_active=True).exists():
        return Response(
            {'detail': 'Active blocks cannot be deleted. Unfreeze the student first.'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    if not BlockStore.load().delete_history_entry(block_id):
        return Response({'detail': 'Block not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(status=status.HTTP_204_NO_CONTENT)
