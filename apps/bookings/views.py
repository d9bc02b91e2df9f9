"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.container import get_services
from apps.bookings.domain.fares import estimate_fare
from .serializers import (
    AssignmentOptionsSerializer,
    AssignSerializer,
    BookingCreateSerializer,
    BookingListQuerySerializer,
    BookingSerializer,
    FareEstimateQuerySerializer,
    PaymentSerializer,
    TrackingSerializer,
)


class BookingViewSet(viewsets.ViewSet):
    """Guest form, admin desk and driver app endpoints for bookings.

    Filters on `list`:
    - `phone`: guest lookup, newest pickup first
    - `driver` (+ `scope`, `date`, `status`): the driver's bookings
    - `day`: non-cancelled bookings on a calendar day
    - `status`: every booking with that status
    """

    lookup_field = "confirmation_number"
    lookup_value_regex = "[A-Za-z0-9]+"

    def list(self, request):  # type: ignore
        query = BookingListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        queries = get_services().queries

        if params.get("phone"):
            bookings = queries.for_guest_phone(params["phone"])
        elif params.get("driver"):
            on_date = params.get("date")
            bookings = queries.for_driver(
                params["driver"],
                scope=params["scope"],
                on_date=on_date.isoformat() if on_date else None,
                status=params.get("status") or None,
            )
        elif params.get("day"):
            bookings = queries.on_day(params["day"].isoformat())
        else:
            bookings = queries.list(status=params.get("status") or None)

        return Response(BookingSerializer(bookings, many=True).data)

    def create(self, request):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = get_services().lifecycle.create(serializer.to_request())
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, confirmation_number=None):  # type: ignore
        booking = get_services().queries.get(confirmation_number)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, confirmation_number=None):  # type: ignore
        booking = get_services().lifecycle.cancel(confirmation_number)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def pay(self, request, confirmation_number=None):  # type: ignore
        serializer = PaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = get_services().lifecycle.mark_paid(
            confirmation_number, serializer.validated_data["payment_id"]
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def assign(self, request, confirmation_number=None):  # type: ignore
        serializer = AssignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = get_services().assignment.assign(
            confirmation_number,
            serializer.validated_data["driver_name"],
            serializer.validated_data["vehicle_plate"],
        )
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, confirmation_number=None):  # type: ignore
        options = get_services().assignment.availability(confirmation_number)
        return Response(AssignmentOptionsSerializer(options).data)

    @action(detail=True, methods=["get"])
    def tracking(self, request, confirmation_number=None):  # type: ignore
        booking = get_services().queries.get(confirmation_number)
        return Response(TrackingSerializer(booking).data)

    @action(detail=False, methods=["get"], url_path="fare-estimate")
    def fare_estimate(self, request):  # type: ignore
        query = FareEstimateQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        location = query.validated_data["location"]
        vehicle_type = query.validated_data["vehicle_type"]
        return Response({
            "location": location,
            "vehicle_type": vehicle_type,
            "estimated_fare": estimate_fare(location, vehicle_type),
        })
