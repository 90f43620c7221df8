"""
Payments API
POST /api/payments/register          Register (or re-register) a month payment
POST /api/payments/<id>/refund       Refund a month
POST /api/payments/<id>/notified     Mark payment message as sent
GET  /api/payments/?month=&student=  List payments
GET  /api/payments/unpaid?month=&grade=
GET  /api/payments/summary?month=
Frozen students: 409 {status: blocked, reason}
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import serializers as drf_serializers

from accounts.permissions import IsStaffMember
from students.models import Student
from students.serializers import StudentSerializer
from .models import Payment
from .serializers import PaymentSerializer, RegisterPaymentSerializer, validate_month
from .services import (
    BLOCKED,
    current_month,
    mark_notified,
    month_summary,
    refund_payment,
    register_payment,
    unpaid_students,
)

logger = logging.getLogger(__name__)


def _blocked_response(result):
    return Response({'status': BLOCKED, 'reason': result.reason}, status=status.HTTP_409_CONFLICT)


def _month_param(request):
    month = request.query_params.get('month') or current_month()
    try:
        return validate_month(month)
    except drf_serializers.ValidationError:
        return None


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def payment_list_view(request):
    qs = Payment.objects.select_related('student')
    month = request.query_params.get('month')
    student = request.query_params.get('student')
    if month:
        qs = qs.filter(month=month)
    if student:
        qs = qs.filter(student_id=student)
    return Response(PaymentSerializer(qs, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def register_view(request):
    serializer = RegisterPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    try:
        student = Student.objects.get(pk=data['student'])
    except Student.DoesNotExist:
        return Response({'detail': 'Student not found'}, status=status.HTTP_404_NOT_FOUND)

    result = register_payment(student, data['month'], amount=data.get('amount'))
    if result.status == BLOCKED:
        return _blocked_response(result)
    return Response(
        {'status': result.status, 'payment': PaymentSerializer(result.payment).data},
        status=status.HTTP_200_OK,
    )


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def refund_view(request, pk):
    try:
        payment = Payment.objects.select_related('student').get(pk=pk)
    except Payment.DoesNotExist:
        return Response({'detail': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)

    result = refund_payment(payment)
    if result.status == BLOCKED:
        return _blocked_response(result)
    return Response({'status': result.status, 'payment': PaymentSerializer(result.payment).data})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaffMember])
def mark_notified_view(request, pk):
    try:
        payment = Payment.objects.select_related('student').get(pk=pk)
    except Payment.DoesNotExist:
        return Response({'detail': 'Payment not found'}, status=status.HTTP_404_NOT_FOUND)
    mark_notified(payment)
    return Response(PaymentSerializer(payment).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def unpaid_view(request):
    month = _month_param(request)
    if month is None:
        return Response({'detail': 'Month must be in YYYY-MM format.'}, status=status.HTTP_400_BAD_REQUEST)
    students = unpaid_students(month, grade=request.query_params.get('grade'))
    return Response({'month': month, 'students': StudentSerializer(students, many=True).data})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffMember])
def summary_view(request):
    month = _month_param(request)
    if month is None:
        return Response({'detail': 'Month must be in YYYY-MM format.'}, status=status.HTTP_400_BAD_REQUEST)
    summary = month_summary(month)
    summary['collected'] = float(summary['collected'])
    return Response(summary)
