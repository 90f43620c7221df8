"""
Alerts API
GET   /api/alerts/rules
PATCH /api/alerts/rules/<code>                    {is_active} (admin)
GET   /api/alerts/events?status=open|resolved&student=
POST  /api/alerts/events/<id>/resolve
POST  /api/alerts/events/<id>/decision            {decision: allow|freeze, reason}; 409 once resolved
GET   /api/alerts/students/<id>/evaluate?date=    Dry run, nothing recorded
"""
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from blocks.serializers import StudentBlockSerializer
from students.models import Student
from .models import AlertEvent, AlertRule
from .serializers import (
    AlertEventSerializer,
    AlertRuleSerializer,
    DecisionSerializer,
    TriggeredAlertSerializer,
)
from .services import EventAlreadyResolved, apply_decision, evaluate_student, resolve_event, set_rule_active


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def rule_list_view(request):
    return Response(AlertRuleSerializer(AlertRule.objects.all(), many=True).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def rule_toggle_view(request, code):
    is_active = request.data.get('is_active')
    if not isinstance(is_active, bool):
        return Response({'detail': 'is_active must be true or false.'}, status=status.HTTP_400_BAD_REQUEST)
    try:
        rule = set_rule_active(code, is_active)
    except AlertRule.DoesNotExist:
        return Response({'detail': 'Rule not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(AlertRuleSerializer(rule).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def event_list_view(request):
    qs = AlertEvent.objects.select_related('student')
    event_status = request.query_params.get('status')
    student = request.query_params.get('student')
    if event_status:
        qs = qs.filter(status=event_status)
    if student:
        qs = qs.filter(student_id=student)
    return Response(AlertEventSerializer(qs, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def event_resolve_view(request, pk):
    if not AlertEvent.objects.filter(pk=pk).exists():
        return Response({'detail': 'Event not found'}, status=status.HTTP_404_NOT_FOUND)
    event = resolve_event(pk)
    return Response(AlertEventSerializer(event).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def event_decision_view(request, pk):
    try:
        event = AlertEvent.objects.select_related('student').get(pk=pk)
    except AlertEvent.DoesNotExist:
        return Response({'detail': 'Event not found'}, status=status.HTTP_404_NOT_FOUND)
    serializer = DecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    try:
        result = apply_decision(
            event,
            serializer.validated_data['decision'],
            reason=serializer.validated_data.get('reason') or None,
        )
    except EventAlreadyResolved:
        return Response({'detail': 'Event already resolved'}, status=status.HTTP_409_CONFLICT)
    return Response({
        'decision': result.decision,
        'event': AlertEventSerializer(result.event).data,
        'block': StudentBlockSerializer(result.block).data if result.block else None,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def student_evaluate_view(request, student_id):
    try:
        student = Student.objects.get(pk=student_id)
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)
    raw = request.query_params.get('date')
    day = parse_date(raw) if raw else timezone.localdate()
    if day is None:
        return Response({'detail': 'Invalid date. Use YYYY-MM-DD.'}, status=status.HTTP_400_BAD_REQUEST)
    alerts = evaluate_student(student, day)
    return Response({'date': day.isoformat(), 'alerts': TriggeredAlertSerializer(alerts, many=True).data})
