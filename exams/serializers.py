"""
Serializers for exams app
"""
from rest_framework import serializers
from .models import Exam, ExamResult


class ExamSerializer(serializers.ModelSerializer):
    class Meta:
        model = Exam
        fields = ['id', 'name', 'date', 'max_score', 'grade']
        read_only_fields = ['id']

    def validate_max_score(self, value):
        if value <= 0:
            raise serializers.ValidationError('Max score must be greater than 0.')
        return value


class ExamResultSerializer(serializers.ModelSerializer):
    studentName = serializers.CharField(source='student.name', read_only=True)
    percentage = serializers.IntegerField(read_only=True)

    class Meta:
        model = ExamResult
        fields = ['id', 'exam', 'student', 'studentName', 'score', 'percentage', 'notified']
        read_only_fields = fields


class ResultEntrySerializer(serializers.Serializer):
    student = serializers.UUIDField()
    score = serializers.DecimalField(max_digits=6, decimal_places=2, min_value=0)


class ResultBatchSerializer(serializers.Serializer):
    results = ResultEntrySerializer(many=True, allow_empty=False)

    def validate_results(self, value):
        max_score = self.context['exam'].max_score
        errors = {}
        for entry in value:
            if entry['score'] > max_score:
                errors[str(entry['student'])] = f'Score must be between 0 and {max_score}.'
        if errors:
            raise serializers.ValidationError(errors)
        return value


class EntryResultSerializer(serializers.Serializer):
    student = serializers.CharField(source='student_id')
    status = serializers.CharField()
    reason = serializers.CharField()
