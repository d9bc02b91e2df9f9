"""Integration tests for fleet API endpoints."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APISimpleTestCase

from apps.bookings.container import build_services, reset_services, set_services


class FleetAPITests(APISimpleTestCase):
    """Covers the driver registry, presence toggle and vehicles."""

    def setUp(self) -> None:
        self.services = build_services(run_threads=False, seed=True)
        set_services(self.services)
        self.addCleanup(reset_services)

    def test_list_drivers_hides_credentials(self) -> None:
        response = self.client.get(reverse("driver-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 4)
        self.assertNotIn("credential_secret", response.data[0])
        self.assertNotIn("password", response.data[0])

    def test_create_driver(self) -> None:
        response = self.client.post(
            reverse("driver-list"),
            {"name": "Neha Joshi", "phone": "9123456780", "username": "neha", "password": "s3cret-pass"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "online")

        response = self.client.post(
            reverse("driver-list"),
            {"name": "Neha Two", "phone": "9123456781", "username": "neha", "password": "s3cret-pass"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_presence_toggle(self) -> None:
        offline = self.client.post(reverse("driver-offline", kwargs={"username": "ravi"}))
        self.assertEqual(offline.status_code, status.HTTP_200_OK)
        self.assertEqual(offline.data["status"], "offline")
        self.assertIsNone(offline.data["position"])

        moved = self.client.post(
            reverse("driver-position", kwargs={"username": "ravi"}),
            {"lat": 23.18, "lng": 79.95},
            format="json",
        )
        self.assertEqual(moved.status_code, status.HTTP_409_CONFLICT)

        online = self.client.post(
            reverse("driver-online", kwargs={"username": "ravi"}),
            {"lat": 23.18, "lng": 79.95},
            format="json",
        )
        self.assertEqual(online.status_code, status.HTTP_200_OK)
        self.assertEqual(online.data["position"], {"lat": 23.18, "lng": 79.95})

    def test_half_position_is_rejected(self) -> None:
        response = self.client.post(
            reverse("driver-online", kwargs={"username": "ravi"}),
            {"lat": 23.18},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_driver(self) -> None:
        response = self.client.post(reverse("driver-offline", kwargs={"username": "ghost"}))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_vehicle_types_and_vehicles(self) -> None:
        response = self.client.get(reverse("vehicle-type-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({vt["name"] for vt in response.data}, {"Standard Sedan", "SUV"})

        response = self.client.post(
            reverse("vehicle-type-vehicles", kwargs={"name": "SUV"}),
            {"plate": "MP20TA2000", "model": "Toyota Innova"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)

        response = self.client.get(reverse("vehicle-type-detail", kwargs={"name": "SUV"}))
        self.assertEqual(len(response.data["vehicles"]), 2)

        response = self.client.delete(reverse("vehicle-detail", kwargs={"plate": "MP20TA2000"}))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_vehicle_type_with_spaces_in_name(self) -> None:
        response = self.client.get(reverse("vehicle-type-detail", kwargs={"name": "Standard Sedan"}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["capacity"], 4)
