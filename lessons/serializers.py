"""
Serializers for lessons app
"""
from rest_framework import serializers
from .models import Lesson, LessonHomework


class LessonSerializer(serializers.ModelSerializer):
    class Meta:
        model = Lesson
        fields = ['id', 'name', 'date', 'grade', 'group', 'sheet_max_score', 'recitation_max_score']
        read_only_fields = ['id']

    def validate(self, attrs):
        grade = attrs.get('grade') or (self.instance.grade if self.instance else None)
        group = attrs.get('group')
        if group is not None and grade is not None and group.grade_id != grade.pk:
            raise serializers.ValidationError({'group': 'Group belongs to a different grade.'})
        return attrs


class GradeEntrySerializer(serializers.Serializer):
    student = serializers.UUIDField()
    sheet_score = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0, required=False, allow_null=True)
    recitation_score = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0, required=False, allow_null=True)
    homework = serializers.ChoiceField(choices=LessonHomework.STATUS_CHOICES, required=False, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class GradeBatchSerializer(serializers.Serializer):
    entries = GradeEntrySerializer(many=True, allow_empty=False)

    def validate_entries(self, value):
        lesson = self.context['lesson']
        errors = {}
        for entry in value:
            sheet = entry.get('sheet_score')
            recitation = entry.get('recitation_score')
            if sheet is not None and sheet > lesson.sheet_max_score:
                errors[str(entry['student'])] = f'Sheet score must be between 0 and {lesson.sheet_max_score}.'
            elif recitation is not None and recitation > lesson.recitation_max_score:
                errors[str(entry['student'])] = (
                    f'Recitation score must be between 0 and {lesson.recitation_max_score}.'
                )
        if errors:
            raise serializers.ValidationError(errors)
        return value
