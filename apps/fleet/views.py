"""API views for the fleet domain."""

from __future__ import annotations

from rest_framework import status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.container import get_services
from .serializers import (
    DriverCreateSerializer,
    DriverSerializer,
    OptionalPositionSerializer,
    PositionSerializer,
    VehicleSerializer,
    VehicleTypeSerializer,
)


class DriverViewSet(viewsets.ViewSet):
    """Driver registry and the driver app presence toggle."""

    lookup_field = "username"

    def list(self, request):  # type: ignore
        drivers = get_services().fleet.list_drivers()
        return Response(DriverSerializer(drivers, many=True).data)

    def create(self, request):  # type: ignore
        serializer = DriverCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        driver = get_services().fleet.add_driver(
            data["name"], data["phone"], data["username"], data["password"]
        )
        return Response(DriverSerializer(driver).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, username=None):  # type: ignore
        driver = get_services().fleet.get_driver(username)
        return Response(DriverSerializer(driver).data)

    def destroy(self, request, username=None):  # type: ignore
        get_services().fleet.remove_driver(username)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def online(self, request, username=None):  # type: ignore
        serializer = OptionalPositionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        driver = get_services().fleet.go_online(username, serializer.to_position())
        return Response(DriverSerializer(driver).data)

    @action(detail=True, methods=["post"])
    def offline(self, request, username=None):  # type: ignore
        driver = get_services().fleet.go_offline(username)
        return Response(DriverSerializer(driver).data)

    @action(detail=True, methods=["post"])
    def position(self, request, username=None):  # type: ignore
        serializer = PositionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        driver = get_services().fleet.update_position(username, serializer.to_position())
        return Response(DriverSerializer(driver).data)


class VehicleTypeViewSet(viewsets.ViewSet):
    """Vehicle type buckets and the vehicles inside them."""

    lookup_field = "name"
    lookup_value_regex = "[^/]+"

    def list(self, request):  # type: ignore
        vehicle_types = get_services().fleet.list_vehicle_types()
        return Response(VehicleTypeSerializer(vehicle_types, many=True).data)

    def create(self, request):  # type: ignore
        serializer = VehicleTypeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vehicle_type = get_services().fleet.add_vehicle_type(
            serializer.validated_data["name"], serializer.validated_data["capacity"]
        )
        return Response(VehicleTypeSerializer(vehicle_type).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, name=None):  # type: ignore
        vehicle_type = get_services().fleet.get_vehicle_type(name)
        return Response(VehicleTypeSerializer(vehicle_type).data)

    @action(detail=True, methods=["post"])
    def vehicles(self, request, name=None):  # type: ignore
        serializer = VehicleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vehicle = get_services().fleet.add_vehicle(
            name, serializer.validated_data["plate"], serializer.validated_data["model"]
        )
        return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)


class VehicleViewSet(viewsets.ViewSet):
    """Removal of single vehicles by plate."""

    lookup_field = "plate"

    def destroy(self, request, plate=None):  # type: ignore
        get_services().fleet.remove_vehicle(plate)
        return Response(status=status.HTTP_204_NO_CONTENT)
