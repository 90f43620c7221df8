"""
Serializers for payments app
"""
import re
from decimal import Decimal

from django.core.validators import MinValueValidator
from rest_framework import serializers

from .models import Payment

MONTH_RE = re.compile(r'^\d{4}-(0[1-9]|1[0-2])$')


def validate_month(value):
    if not MONTH_RE.match(value or ''):
        raise serializers.ValidationError('Month must be in YYYY-MM format.')
    return value


class PaymentSerializer(serializers.ModelSerializer):
    studentName = serializers.CharField(source='student.name', read_only=True)

    class Meta:
        model = Payment
        fields = ['id', 'student', 'studentName', 'month', 'amount', 'paid', 'paid_at', 'notified']
        read_only_fields = fields

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data.get('amount') is not None:
            data['amount'] = float(data['amount'])
        return data


class RegisterPaymentSerializer(serializers.Serializer):
    student = serializers.UUIDField()
    month = serializers.CharField(max_length=7, validators=[validate_month])
    amount = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        required=False,
        allow_null=True,
        validators=[MinValueValidator(Decimal('0'))],
    )
