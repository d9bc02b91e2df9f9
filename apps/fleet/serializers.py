"""Serializers for the fleet domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import GeoPosition


class PositionSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)

    def to_position(self) -> GeoPosition:
        return GeoPosition(**self.validated_data)


class OptionalPositionSerializer(PositionSerializer):
    """Going online may or may not come with a geolocation fix."""

    lat = serializers.FloatField(min_value=-90, max_value=90, required=False)
    lng = serializers.FloatField(min_value=-180, max_value=180, required=False)

    def validate(self, attrs):  # type: ignore
        if ("lat" in attrs) != ("lng" in attrs):
            raise serializers.ValidationError("Both lat and lng are required for a position.")
        return attrs

    def to_position(self) -> GeoPosition | None:
        if not self.validated_data:
            return None
        return super().to_position()


class DriverSerializer(serializers.Serializer):
    """Public view of a driver; the credential hash is never exposed."""

    name = serializers.CharField()
    phone = serializers.CharField()
    username = serializers.CharField()
    status = serializers.CharField(source="status.value")
    position = PositionSerializer(allow_null=True)


class DriverCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=32)
    username = serializers.CharField(max_length=64)
    password = serializers.CharField(write_only=True, min_length=6)


class VehicleSerializer(serializers.Serializer):
    plate = serializers.CharField(max_length=16)
    model = serializers.CharField(max_length=64)


class VehicleTypeSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=64)
    capacity = serializers.IntegerField(min_value=1)
    vehicles = VehicleSerializer(many=True, read_only=True)
