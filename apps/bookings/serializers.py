"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.bookings.application.lifecycle import BookingRequest
from apps.bookings.domain.entities import ServiceType


class BookingCreateSerializer(serializers.Serializer):
    """Guest booking form.

    Presence of the required fields is checked by the lifecycle manager so
    the guest gets one message listing everything that is missing.
    """

    guest_name = serializers.CharField(default="", allow_blank=True, max_length=120)
    guest_phone = serializers.CharField(default="", allow_blank=True, max_length=32)
    location = serializers.CharField(default="", allow_blank=True, max_length=255)
    date = serializers.CharField(default="", allow_blank=True, max_length=10)
    time = serializers.CharField(default="", allow_blank=True, max_length=8)
    service_type = serializers.CharField(default=ServiceType.PICKUP.value, max_length=16)
    vehicle_type = serializers.CharField(default="Standard Sedan", max_length=64)

    def to_request(self) -> BookingRequest:
        return BookingRequest(**self.validated_data)


class VehicleSerializer(serializers.Serializer):
    plate = serializers.CharField()
    model = serializers.CharField()


class MapPointSerializer(serializers.Serializer):
    x = serializers.FloatField()
    y = serializers.FloatField()


class BookingSerializer(serializers.Serializer):
    """Read model of a booking."""

    confirmation_number = serializers.CharField()
    guest_name = serializers.CharField()
    guest_phone = serializers.CharField()
    location = serializers.CharField()
    date = serializers.CharField()
    time = serializers.CharField()
    service_type = serializers.CharField(source="service_type.value")
    vehicle_type = serializers.CharField()
    estimated_fare = serializers.IntegerField()

    confirmation_message = serializers.CharField()
    estimated_trip_duration = serializers.CharField()
    estimated_arrival_time = serializers.CharField()

    driver_name = serializers.CharField(allow_null=True)
    driver_phone = serializers.CharField(allow_null=True)
    assigned_vehicle = VehicleSerializer(allow_null=True)

    booking_status = serializers.CharField(source="booking_status.value")
    driver_status = serializers.CharField(source="driver_status.value")
    payment_status = serializers.CharField(source="payment_status.value")
    payment_id = serializers.CharField(allow_null=True)

    driver_position = MapPointSerializer(allow_null=True)
    trip_progress = serializers.FloatField()
    eta = serializers.CharField(allow_null=True)

    created_at = serializers.DateTimeField()
    assigned_at = serializers.DateTimeField(allow_null=True)
    cancelled_at = serializers.DateTimeField(allow_null=True)
    paid_at = serializers.DateTimeField(allow_null=True)
    arrived_at = serializers.DateTimeField(allow_null=True)


class TrackingSerializer(serializers.Serializer):
    """Live trip view polled by the guest and admin screens."""

    confirmation_number = serializers.CharField()
    driver_name = serializers.CharField(allow_null=True)
    driver_status = serializers.CharField(source="driver_status.value")
    driver_position = MapPointSerializer(allow_null=True)
    trip_progress = serializers.FloatField()
    eta = serializers.CharField(allow_null=True)


class AssignSerializer(serializers.Serializer):
    driver_name = serializers.CharField(default="", allow_blank=True)
    vehicle_plate = serializers.CharField(default="", allow_blank=True)


class PaymentSerializer(serializers.Serializer):
    payment_id = serializers.CharField(default="", allow_blank=True, max_length=128)


class FareEstimateQuerySerializer(serializers.Serializer):
    location = serializers.CharField()
    vehicle_type = serializers.CharField(default="Standard Sedan")


class ResourceAvailabilitySerializer(serializers.Serializer):
    key = serializers.CharField()
    label = serializers.CharField()
    state = serializers.CharField(source="state.value")
    reason = serializers.CharField(allow_null=True)


class AssignmentOptionsSerializer(serializers.Serializer):
    confirmation_number = serializers.CharField()
    drivers = ResourceAvailabilitySerializer(many=True)
    vehicles = ResourceAvailabilitySerializer(many=True)


class BookingListQuerySerializer(serializers.Serializer):
    """Query parameters of the booking list endpoint."""

    status = serializers.CharField(required=False, allow_blank=True)
    phone = serializers.CharField(required=False, allow_blank=True)
    driver = serializers.CharField(required=False, allow_blank=True)
    scope = serializers.ChoiceField(choices=["current", "history"], default="current")
    date = serializers.DateField(required=False)
    day = serializers.DateField(required=False)
