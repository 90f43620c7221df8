"""
Notifications API.
WhatsApp links (the message is opened on the staff device, the record is marked notified):
- POST /api/notifications/whatsapp/absence/<attendance_id>
- POST /api/notifications/whatsapp/payment            {student, month}
- POST /api/notifications/whatsapp/exam-result/<result_id>
Templates:
- GET   /api/notifications/templates
- PATCH /api/notifications/templates/<code>  (admin)
Push:
- POST /api/notifications/tokens              Register this device
- POST /api/notifications/push                Send to devices (admin)
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsStaffMember
from attendance.models import AttendanceRecord
from attendance.services.marking import mark_notified as mark_attendance_notified
from core.context import get_app_context
from exams.models import ExamResult
from exams.services import mark_notified as mark_result_notified
from payments.models import Payment
from payments.services import mark_notified as mark_payment_notified
from students.models import Student
from .messages import (
    ABSENCE,
    EXAM_RESULT,
    PAYMENT_REMINDER,
    absence_message,
    exam_result_message,
    get_template,
    payment_reminder_message,
)
from .models import WhatsAppTemplate
from .push import PushDeliveryError, register_token, send_push
from .serializers import (
    FcmTokenSerializer,
    PaymentReminderSerializer,
    PushSerializer,
    WhatsAppTemplateSerializer,
)
from .whatsapp import build_whatsapp_link

logger = logging.getLogger(__name__)


def _links(student, target, message):
    """One link per recipient: parent, student or both (student only if a number exists)."""
    recipients = []
    if target in (WhatsAppTemplate.TARGET_PARENT, WhatsAppTemplate.TARGET_BOTH):
        recipients.append(('parent', student.parent_phone))
    if target in (WhatsAppTemplate.TARGET_STUDENT, WhatsAppTemplate.TARGET_BOTH) and student.student_phone:
        recipients.append(('student', student.student_phone))
    if not recipients:
        recipients.append(('parent', student.parent_phone))
    return [
        {'target': who, 'phone': phone, 'url': build_whatsapp_link(phone, message)}
        for who, phone in recipients
    ]


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def absence_link_view(request, attendance_id):
    try:
        record = AttendanceRecord.objects.select_related('student').get(pk=attendance_id)
    except AttendanceRecord.DoesNotExist:
        return Response({'detail': 'Attendance record not found'}, status=status.HTTP_404_NOT_FOUND)
    if record.present:
        return Response({'detail': 'Student was present on this date.'}, status=status.HTTP_400_BAD_REQUEST)

    template, target = get_template(ABSENCE)
    message = absence_message(get_app_context(), record.student.name, record.date, template)
    mark_attendance_notified(record)
    return Response({'message': message, 'links': _links(record.student, target, message)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def payment_link_view(request):
    serializer = PaymentReminderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        student = Student.objects.get(pk=data['student'])
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    payment = Payment.objects.filter(student=student, month=data['month']).first()
    if payment is not None and payment.paid:
        return Response({'detail': 'Month is already paid.'}, status=status.HTTP_400_BAD_REQUEST)
    amount = payment.amount if payment is not None else student.monthly_fee

    template, target = get_template(PAYMENT_REMINDER)
    message = payment_reminder_message(get_app_context(), student.name, data['month'], amount, template)
    if payment is not None:
        mark_payment_notified(payment)
    return Response({'message': message, 'links': _links(student, target, message)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def exam_result_link_view(request, result_id):
    try:
        result = ExamResult.objects.select_related('student', 'exam').get(pk=result_id)
    except ExamResult.DoesNotExist:
        return Response({'detail': 'Result not found'}, status=status.HTTP_404_NOT_FOUND)

    template, target = get_template(EXAM_RESULT)
    message = exam_result_message(
        get_app_context(),
        result.student.name,
        result.exam.name,
        result.score,
        result.exam.max_score,
        template,
    )
    mark_result_notified(result)
    return Response({'message': message, 'links': _links(result.student, target, message)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def template_list_view(request):
    return Response(WhatsAppTemplateSerializer(WhatsAppTemplate.objects.all(), many=True).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def template_update_view(request, code):
    try:
        template = WhatsAppTemplate.objects.get(code=code)
    except WhatsAppTemplate.DoesNotExist:
        return Response({'detail': 'Template not found'}, status=status.HTTP_404_NOT_FOUND)
    serializer = WhatsAppTemplateSerializer(template, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def register_token_view(request):
    serializer = FcmTokenSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    token = register_token(
        request.user,
        serializer.validated_data['token'],
        serializer.validated_data.get('device_info', ''),
    )
    return Response(FcmTokenSerializer(token).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def push_view(request):
    serializer = PushSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        result = send_push(data['title'], data['body'], data['type'], data.get('tokens'))
    except PushDeliveryError as exc:
        return Response({'detail': str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
    return Response(result)
