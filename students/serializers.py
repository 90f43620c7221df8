"""
Serializers for students app
"""
import re

from rest_framework import serializers
from .models import Student

PHONE_RE = re.compile(r'^(?:\+?20|0)?1[0125]\d{8}$')


def validate_phone_number(value):
    digits = re.sub(r'[\s\-]', '', value or '')
    if not PHONE_RE.match(digits):
        raise serializers.ValidationError('رقم الموبايل غير صحيح')
    return digits


class StudentSerializer(serializers.ModelSerializer):
    """Student serializer. code is generated and read-only."""
    groupName = serializers.CharField(source='group.name', read_only=True, default=None)

    class Meta:
        model = Student
        fields = [
            'id', 'code', 'name', 'grade', 'group', 'groupName',
            'parent_phone', 'student_phone', 'monthly_fee', 'registered_at', 'created_at',
        ]
        read_only_fields = ['id', 'code', 'created_at']

    def validate_parent_phone(self, value):
        return validate_phone_number(value)

    def validate_student_phone(self, value):
        if not value:
            return None
        return validate_phone_number(value)

    def validate_monthly_fee(self, value):
        if value < 0:
            raise serializers.ValidationError('Monthly fee cannot be negative.')
        return value

    def validate(self, attrs):
        grade = attrs.get('grade') or (self.instance.grade if self.instance else None)
        group = attrs.get('group')
        if group is not None and grade is not None and group.grade_id != grade.pk:
            raise serializers.ValidationError({'group': 'Group belongs to a different grade.'})
        return attrs

    def create(self, validated_data):
        from .services import create_student
        return create_student(**validated_data)
