"""
Students API
GET/POST /api/students/
GET/PATCH/DELETE /api/students/<id>
GET /api/students/by-code/<code>
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from .models import Student
from .serializers import StudentSerializer
from .services import get_by_code

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_list_view(request):
    """
    GET: list students (?grade=<code>&group=<id>&search=<name or code>)
    POST: enroll a student (code generated)
    """
    if request.method == 'GET':
        qs = Student.objects.select_related('grade', 'group')
        grade = request.query_params.get('grade')
        group = request.query_params.get('group')
        search = (request.query_params.get('search') or '').strip()
        if grade:
            qs = qs.filter(grade_id=grade)
        if group:
            qs = qs.filter(group_id=group)
        if search:
            qs = qs.filter(name__icontains=search) | qs.filter(code__iexact=search)
        return Response(StudentSerializer(qs, many=True).data)

    serializer = StudentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    student = serializer.save()
    return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_detail_view(request, pk):
    try:
        student = Student.objects.select_related('grade', 'group').get(pk=pk)
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(StudentSerializer(student).data)

    if request.method == 'PATCH':
        serializer = StudentSerializer(student, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    if not IsAdmin().has_permission(request, None):
        return Response({'detail': 'Only admins can delete students.'}, status=status.HTTP_403_FORBIDDEN)
    logger.info(f"[student] deleted id={student.id} code={student.code} by user={request.user.id}")
    student.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_by_code_view(request, code):
    """Resolve a scanned or typed student code."""
    student = get_by_code(code)
    if student is None:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(StudentSerializer(student).data)
