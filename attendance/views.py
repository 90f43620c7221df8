"""
Attendance API.
Endpoints:
- POST /api/attendance/mark                  Mark present/absent for a student and date
- POST /api/attendance/scan                  Check-in by code (QR or manual), gated by blocks and alerts
- GET  /api/attendance/daily?date=&group=    Records of one day
- GET  /api/attendance/absences?date=        Absent students of one day
- POST /api/attendance/<id>/notified         Mark absence message as sent
- GET  /api/attendance/students/<id>/stats   Present/absent totals
"""
import logging

from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsStaffMember
from alerts.serializers import TriggeredAlertSerializer
from students.models import Student
from students.services import get_by_code
from .models import AttendanceRecord
from .serializers import (
    AbsenceSerializer,
    AttendanceRecordSerializer,
    MarkAttendanceSerializer,
    ScanSerializer,
)
from .services.check_in import ALERTS_PENDING, BLOCKED, DIFFERENT_DAY, DIFFERENT_GROUP, SESSION_ENDED, check_in
from .services.marking import ALREADY_PRESENT, INSERTED, absences_for_date, mark_attendance, mark_notified, student_stats

logger = logging.getLogger(__name__)


def _date_param(request):
    raw = request.query_params.get('date')
    if not raw:
        return timezone.localdate()
    return parse_date(raw)


def _mark_response(result, student):
    http_status = status.HTTP_201_CREATED if result.status == INSERTED else status.HTTP_200_OK
    return Response({
        'status': result.status,
        'studentName': student.name,
        'record': AttendanceRecordSerializer(result.record).data if result.record else None,
    }, status=http_status)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def mark_view(request):
    serializer = MarkAttendanceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        student = Student.objects.get(pk=data['student'])
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    result = mark_attendance(student, data['date'], data['present'])
    return _mark_response(result, student)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def scan_view(request):
    """
    Body: {code, date, allow, group}
    - 409 {status: blocked, reason} when the student is frozen
    - 200 {status: alerts_pending, alerts, eventIds} when a decision is required
    - 200 {status: session_ended / different_group / different_day, reason, ...}
      when staff must confirm; resend with allow=true
    - 200 {status: already_present} on duplicate scan
    - 201 {status: inserted} / 200 {status: updated}
    """
    serializer = ScanSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    student = get_by_code(data['code'])
    if student is None:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    result = check_in(student, data['date'], allow=data['allow'], selected_group=data.get('group'))
    if result.status == BLOCKED:
        return Response(
            {'status': BLOCKED, 'studentName': student.name, 'reason': result.reason},
            status=status.HTTP_409_CONFLICT,
        )
    if result.status == ALERTS_PENDING:
        return Response({
            'status': ALERTS_PENDING,
            'studentId': str(student.pk),
            'studentName': student.name,
            'alerts': TriggeredAlertSerializer(result.alerts, many=True).data,
            'eventIds': [str(e.pk) for e in result.events],
        }, status=status.HTTP_200_OK)
    if result.status in (SESSION_ENDED, DIFFERENT_GROUP, DIFFERENT_DAY):
        return Response({
            'status': result.status,
            'studentId': str(student.pk),
            'studentName': student.name,
            'reason': result.reason,
            **result.context,
        }, status=status.HTTP_200_OK)
    if result.status == ALREADY_PRESENT:
        return Response({'status': ALREADY_PRESENT, 'studentName': student.name}, status=status.HTTP_200_OK)
    return _mark_response(result, student)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def daily_view(request):
    day = _date_param(request)
    if day is None:
        return Response({'detail': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)
    qs = AttendanceRecord.objects.filter(date=day).select_related('student')
    group = request.query_params.get('group')
    if group:
        qs = qs.filter(student__group_id=group)
    return Response(AttendanceRecordSerializer(qs, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def absences_view(request):
    day = _date_param(request)
    if day is None:
        return Response({'detail': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(AbsenceSerializer(absences_for_date(day), many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def mark_notified_view(request, pk):
    try:
        record = AttendanceRecord.objects.get(pk=pk)
    except AttendanceRecord.DoesNotExist:
        return Response({'detail': 'Attendance record not found'}, status=status.HTTP_404_NOT_FOUND)
    mark_notified(record)
    return Response(AttendanceRecordSerializer(record).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_stats_view(request, student_id):
    try:
        student = Student.objects.get(pk=student_id)
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(student_stats(student))
