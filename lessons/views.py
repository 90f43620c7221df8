"""
Lessons API
GET/POST /api/lessons/                 (?grade=&group=&date=)
GET/PATCH/DELETE /api/lessons/<id>
GET/POST /api/lessons/<id>/grades      POST records sheet/recitation/homework per student
GET /api/lessons/students/<id>/performance?month=YYYY-MM
"""
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsStaffMember
from exams.serializers import EntryResultSerializer
from students.models import Student
from .models import Lesson
from .serializers import GradeBatchSerializer, LessonSerializer
from .services import monthly_performance, record_lesson_grades


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def lesson_list_view(request):
    if request.method == 'GET':
        qs = Lesson.objects.all()
        for param, lookup in (('grade', 'grade_id'), ('group', 'group_id'), ('date', 'date')):
            value = request.query_params.get(param)
            if value:
                qs = qs.filter(**{lookup: value})
        return Response(LessonSerializer(qs, many=True).data)

    serializer = LessonSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffMember])
def lesson_detail_view(request, pk):
    try:
        lesson = Lesson.objects.get(pk=pk)
    except Lesson.DoesNotExist:
        return Response({'detail': 'Lesson not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(LessonSerializer(lesson).data)
    if request.method == 'PATCH':
        serializer = LessonSerializer(lesson, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
    lesson.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def lesson_grades_view(request, pk):
    try:
        lesson = Lesson.objects.get(pk=pk)
    except Lesson.DoesNotExist:
        return Response({'detail': 'Lesson not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        rows = {}
        for sheet in lesson.sheets.all():
            rows.setdefault(str(sheet.student_id), {})['sheet_score'] = float(sheet.score)
        for rec in lesson.recitations.all():
            rows.setdefault(str(rec.student_id), {})['recitation_score'] = float(rec.score)
        for hw in lesson.homework.all():
            entry = rows.setdefault(str(hw.student_id), {})
            entry['homework'] = hw.status
            entry['note'] = hw.note
        return Response([{'student': sid, **values} for sid, values in rows.items()])

    serializer = GradeBatchSerializer(data=request.data, context={'lesson': lesson})
    serializer.is_valid(raise_exception=True)
    results = record_lesson_grades(lesson, serializer.validated_data['entries'])
    return Response({'results': EntryResultSerializer(results, many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_performance_view(request, student_id):
    try:
        student = Student.objects.get(pk=student_id)
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    month = request.query_params.get('month') or timezone.localdate().strftime('%Y-%m')
    average = monthly_performance(student, month)
    return Response({
        'month': month,
        'average': round(average * 100) if average is not None else None,
    })
