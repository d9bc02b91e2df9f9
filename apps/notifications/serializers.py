"""Serializers for notifications."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore


class NotificationSerializer(serializers.Serializer):
    """Serializer for feed notifications."""

    id = serializers.IntegerField()
    kind = serializers.CharField()
    message = serializers.CharField()
    confirmation_number = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    is_read = serializers.BooleanField()
