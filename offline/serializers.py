from rest_framework import serializers

from .entities import EntityKind, OperationType
from .models import OfflineOperation


class OfflineOperationSerializer(serializers.ModelSerializer):
    entityId = serializers.CharField(source='entity_id', read_only=True)
    lastError = serializers.CharField(source='last_error', read_only=True)
    lastAttemptAt = serializers.DateTimeField(source='last_attempt_at', read_only=True)
    claimedAt = serializers.DateTimeField(source='claimed_at', read_only=True)
    stalled = serializers.SerializerMethodField()

    class Meta:
        model = OfflineOperation
        fields = [
            'id', 'table', 'type', 'entityId', 'payload', 'timestamp',
            'synced', 'attempts', 'lastError', 'lastAttemptAt', 'claimedAt', 'stalled',
        ]

    def get_stalled(self, obj):
        max_attempts = self.context.get('max_attempts')
        return bool(max_attempts) and obj.attempts >= max_attempts


class WriteOperationSerializer(serializers.Serializer):
    table = serializers.ChoiceField(choices=EntityKind.choices)
    type = serializers.ChoiceField(choices=OperationType.choices)
    id = serializers.CharField(required=False, allow_blank=True)
    payload = serializers.DictField(required=False, default=dict)

    def validate(self, attrs):
        if attrs['type'] != OperationType.INSERT and not attrs.get('id'):
            raise serializers.ValidationError({'id': 'Required for update and delete.'})
        return attrs
