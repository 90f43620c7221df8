"""
Exams API
GET/POST /api/exams/                  (?grade=)
GET/PATCH/DELETE /api/exams/<id>
GET/POST /api/exams/<id>/results      POST records a batch; frozen students are skipped
POST /api/exams/results/<id>/notified
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsStaffMember
from .models import Exam, ExamResult
from .serializers import (
    EntryResultSerializer,
    ExamResultSerializer,
    ExamSerializer,
    ResultBatchSerializer,
)
from .services import mark_notified, record_exam_results


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def exam_list_view(request):
    if request.method == 'GET':
        qs = Exam.objects.all()
        grade = request.query_params.get('grade')
        if grade:
            qs = qs.filter(grade_id=grade)
        return Response(ExamSerializer(qs, many=True).data)

    serializer = ExamSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffMember])
def exam_detail_view(request, pk):
    try:
        exam = Exam.objects.get(pk=pk)
    except Exam.DoesNotExist:
        return Response({'detail': 'Exam not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(ExamSerializer(exam).data)
    if request.method == 'PATCH':
        serializer = ExamSerializer(exam, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
    exam.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def exam_results_view(request, pk):
    try:
        exam = Exam.objects.get(pk=pk)
    except Exam.DoesNotExist:
        return Response({'detail': 'Exam not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        qs = exam.results.select_related('student', 'exam')
        return Response(ExamResultSerializer(qs, many=True).data)

    serializer = ResultBatchSerializer(data=request.data, context={'exam': exam})
    serializer.is_valid(raise_exception=True)
    results = record_exam_results(exam, serializer.validated_data['results'])
    return Response({'results': EntryResultSerializer(results, many=True).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def result_notified_view(request, pk):
    try:
        result = ExamResult.objects.select_related('student', 'exam').get(pk=pk)
    except ExamResult.DoesNotExist:
        return Response({'detail': 'Result not found'}, status=status.HTTP_404_NOT_FOUND)
    mark_notified(result)
    return Response(ExamResultSerializer(result).data)
