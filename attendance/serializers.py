"""
Serializers for attendance app
"""
from rest_framework import serializers
from .models import AttendanceRecord


class AttendanceRecordSerializer(serializers.ModelSerializer):
    studentName = serializers.CharField(source='student.name', read_only=True)
    studentCode = serializers.CharField(source='student.code', read_only=True)

    class Meta:
        model = AttendanceRecord
        fields = ['id', 'student', 'studentName', 'studentCode', 'date', 'present', 'notified', 'checked_in_at']
        read_only_fields = fields


class AbsenceSerializer(AttendanceRecordSerializer):
    """Daily absence list row: parent contact for the WhatsApp message."""
    parentPhone = serializers.CharField(source='student.parent_phone', read_only=True)
    groupName = serializers.CharField(source='student.group.name', read_only=True, default=None)

    class Meta(AttendanceRecordSerializer.Meta):
        fields = AttendanceRecordSerializer.Meta.fields + ['parentPhone', 'groupName']
        read_only_fields = fields


class MarkAttendanceSerializer(serializers.Serializer):
    student = serializers.UUIDField()
    date = serializers.DateField()
    present = serializers.BooleanField()


class ScanSerializer(serializers.Serializer):
    """QR payload or manually typed code."""
    code = serializers.CharField(max_length=50)
    date = serializers.DateField()
    allow = serializers.BooleanField(default=False)
    group = serializers.UUIDField(required=False, allow_null=True)
