"""
Serializers for core app
"""
from rest_framework import serializers
from .models import AppSetting


class AppSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = AppSetting
        fields = ['id', 'key', 'value', 'description', 'updated_at']
        read_only_fields = ['id', 'updated_at']


class AppSettingsUpdateSerializer(serializers.Serializer):
    """Body: { settings: [{key, value}] }"""
    settings = serializers.ListField(child=serializers.DictField(child=serializers.CharField(allow_blank=True)), allow_empty=False)

    def validate_settings(self, value):
        for item in value:
            if not item.get('key'):
                raise serializers.ValidationError("Each setting requires a key.")
        return value
