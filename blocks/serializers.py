"""
Serializers for blocks app
"""
from rest_framework import serializers
from .models import StudentBlock


class StudentBlockSerializer(serializers.ModelSerializer):
    studentName = serializers.CharField(source='student.name', read_only=True)

    class Meta:
        model = StudentBlock
        fields = [
            'id', 'student', 'studentName', 'is_active', 'block_type', 'reason',
            'triggered_by_rule_code', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class FreezeSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)
    triggered_by_rule_code = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)
