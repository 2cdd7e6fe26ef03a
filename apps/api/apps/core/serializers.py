"""
System settings serializers.
"""
from rest_framework import serializers

from .models import SystemSetting


class SystemSettingSerializer(serializers.ModelSerializer):

    class Meta:
        model = SystemSetting
        fields = ['id', 'category', 'key', 'value', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class SystemSettingUpsertSerializer(serializers.Serializer):
    """Payload for PUT /settings/upsert/ (insert or update by category+key)."""
    category = serializers.CharField(max_length=50)
    key = serializers.CharField(max_length=100)
    value = serializers.CharField(max_length=500, allow_blank=True)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True)
