"""
Serializers for notifications app
"""
from rest_framework import serializers

from payments.serializers import validate_month
from .models import FcmToken, WhatsAppTemplate


class WhatsAppTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = WhatsAppTemplate
        fields = ['id', 'code', 'name', 'description', 'template', 'is_active', 'target', 'updated_at']
        read_only_fields = ['id', 'code', 'name', 'description', 'updated_at']


class FcmTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = FcmToken
        fields = ['id', 'token', 'device_info', 'created_at']
        read_only_fields = ['id', 'created_at']
        # uniqueness is per user; the view upserts instead of rejecting
        validators = []


class PushSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    body = serializers.CharField()
    type = serializers.CharField(max_length=50, default='general')
    tokens = serializers.ListField(child=serializers.CharField(), required=False, allow_null=True)


class PaymentReminderSerializer(serializers.Serializer):
    student = serializers.UUIDField()
    month = serializers.CharField(max_length=7, validators=[validate_month])
