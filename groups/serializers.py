"""
Serializers for groups app
"""
from rest_framework import serializers
from .models import GradeLevel, Group

WEEKDAYS = ['saturday', 'sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday']


class GradeLevelSerializer(serializers.ModelSerializer):
    class Meta:
        model = GradeLevel
        fields = ['code', 'label', 'sort_order', 'is_active']


class GroupSerializer(serializers.ModelSerializer):
    """Group serializer. studentCount is read-only."""
    studentCount = serializers.IntegerField(source='student_count', read_only=True)
    days = serializers.ListField(
        child=serializers.ChoiceField(choices=WEEKDAYS),
        required=False,
        allow_empty=True,
    )

    class Meta:
        model = Group
        fields = ['id', 'name', 'grade', 'days', 'time', 'time_to', 'studentCount', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_days(self, value):
        # keep week order, drop duplicates
        return [d for d in WEEKDAYS if d in set(value)]
