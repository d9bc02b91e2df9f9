"""
Confirmation text integration

Asks the generative text service (Gemini `generateContent`) for the guest
facing confirmation message, trip duration and arrival estimate. The call is
best effort: when the service is not configured, unreachable or returns
something unusable, `generate()` returns None and the booking is created with
the local fallback text instead.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import requests
from django.conf import settings  # type: ignore

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.application.lifecycle import BookingRequest

logger = logging.getLogger(__name__)

CONFIRMATION_CODE_RE = re.compile(r'^[A-Z0-9]{6}$')

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "confirmationNumber": {
            "type": "STRING",
            "description": "A unique 6-character alphanumeric confirmation code.",
        },
        "confirmationMessage": {
            "type": "STRING",
            "description": "A polite confirmation message for the guest.",
        },
        "estimatedTripDuration": {
            "type": "STRING",
            "description": 'Estimated trip duration (e.g., "approx. 25 minutes").',
        },
        "estimatedArrivalTime": {
            "type": "STRING",
            "description": 'Estimated arrival time of the cab at the pickup location (e.g., "in 10 minutes").',
        },
    },
}


class ConfirmationTextError(Exception):
    """Raised internally when the text service response is unusable."""


@dataclass(frozen=True)
class ConfirmationDetails:
    confirmation_number: str | None
    confirmation_message: str
    estimated_trip_duration: str
    estimated_arrival_time: str


def is_valid_confirmation_code(code: str | None) -> bool:
    return bool(code) and bool(CONFIRMATION_CODE_RE.match(code))


def fallback_details(request: "BookingRequest") -> ConfirmationDetails:
    """Locally generated text used whenever the service gives nothing usable"""
    service = "pickup" if request.service_type == "pickup" else "drop-off"
    return ConfirmationDetails(
        confirmation_number=None,
        confirmation_message=(
            f"Thank you, {request.guest_name}. Your {request.vehicle_type} {service} "
            f"for {request.location} on {request.date} at {request.time} is confirmed. "
            f"We will share your driver's details once assigned."
        ),
        estimated_trip_duration=f"approx. {settings.TRIP_WINDOW_MINUTES} minutes",
        estimated_arrival_time=f"{request.date} {request.time}",
    )


class ConfirmationTextService:
    """Thin client for the generative text collaborator"""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GENAI_API_KEY
        self.model = model or settings.GENAI_MODEL
        self.base_url = (base_url or settings.GENAI_API_BASE_URL).rstrip('/')
        self.timeout = timeout or settings.GENAI_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def build_prompt(self, request: "BookingRequest") -> str:
        return (
            "Generate booking confirmation details for a cab service for the Shawn Elizey hotel. "
            f"Guest: {request.guest_name}, Phone: {request.guest_phone}, "
            f"Location: {request.location}, Date: {request.date}, Time: {request.time}, "
            f"Service: {request.service_type}, Vehicle: {request.vehicle_type}. "
            "Create a unique confirmation number."
        )

    def generate(self, request: "BookingRequest") -> ConfirmationDetails | None:
        """
        Request confirmation text for a booking

        Returns None on any failure; never raises.
        """
        if not self.is_configured:
            logger.debug("Confirmation text service not configured, using fallback text")
            return None

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": self.build_prompt(request)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": RESPONSE_SCHEMA,
            },
        }

        try:
            response = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return self._parse(response.json())
        except requests.RequestException as e:
            logger.warning(f"Confirmation text service unavailable: {e}")
        except (ConfirmationTextError, ValueError) as e:
            logger.warning(f"Confirmation text service returned unusable output: {e}")
        return None

    def _parse(self, body: dict) -> ConfirmationDetails:
        try:
            text = body["candidates"][0]["content"]["parts"][0]["text"]
            data = json.loads(text)
        except (KeyError, IndexError, TypeError, json.JSONDecodeError) as e:
            raise ConfirmationTextError(f"unexpected response shape: {e}") from e

        if not isinstance(data, dict):
            raise ConfirmationTextError("response is not a JSON object")

        message = str(data.get("confirmationMessage") or "").strip()
        if not message:
            raise ConfirmationTextError("confirmationMessage is empty")

        code = str(data.get("confirmationNumber") or "").strip().upper()
        return ConfirmationDetails(
            confirmation_number=code if is_valid_confirmation_code(code) else None,
            confirmation_message=message,
            estimated_trip_duration=str(data.get("estimatedTripDuration") or "").strip(),
            estimated_arrival_time=str(data.get("estimatedArrivalTime") or "").strip(),
        )
