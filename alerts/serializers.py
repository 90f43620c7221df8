"""
Serializers for alerts app
"""
from rest_framework import serializers
from .models import AlertEvent, AlertRule
from .services import DECISION_ALLOW, DECISION_FREEZE


class AlertRuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = AlertRule
        fields = ['id', 'code', 'title', 'description', 'severity', 'is_active', 'config']
        read_only_fields = ['id', 'code', 'title', 'description', 'severity', 'config']


class AlertEventSerializer(serializers.ModelSerializer):
    studentName = serializers.CharField(source='student.name', read_only=True)
    studentCode = serializers.CharField(source='student.code', read_only=True)

    class Meta:
        model = AlertEvent
        fields = [
            'id', 'student', 'studentName', 'studentCode', 'rule_code', 'title', 'message',
            'severity', 'status', 'context', 'created_at', 'resolved_at',
        ]
        read_only_fields = fields


class TriggeredAlertSerializer(serializers.Serializer):
    ruleCode = serializers.CharField(source='rule_code')
    title = serializers.CharField()
    message = serializers.CharField()
    severity = serializers.CharField()
    context = serializers.DictField()


class DecisionSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=[DECISION_ALLOW, DECISION_FREEZE])
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)
