"""Tests for the confirmation text client."""

import json

import requests

from apps.bookings.application.lifecycle import BookingRequest
from apps.bookings.confirmation_text import (
    ConfirmationTextService,
    fallback_details,
    is_valid_confirmation_code,
)


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _gemini_body(payload) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": json.dumps(payload)}]}}]}


def _request() -> BookingRequest:
    return BookingRequest(
        guest_name="Asha Verma",
        guest_phone="9000000001",
        location="Jabalpur Airport",
        date="2030-05-01",
        time="10:00",
    )


def _service(session) -> ConfirmationTextService:
    return ConfirmationTextService(
        api_key="test-key",
        model="gemini-test",
        base_url="https://genai.example/v1beta/",
        timeout=3,
        session=session,
    )


def test_generate_parses_structured_output():
    session = FakeSession(FakeResponse(_gemini_body({
        "confirmationNumber": "ab12cd",
        "confirmationMessage": "Your cab is booked.",
        "estimatedTripDuration": "approx. 25 minutes",
        "estimatedArrivalTime": "in 10 minutes",
    })))

    details = _service(session).generate(_request())

    assert details.confirmation_number == "AB12CD"
    assert details.confirmation_message == "Your cab is booked."
    assert details.estimated_trip_duration == "approx. 25 minutes"
    url, kwargs = session.calls[0]
    assert url == "https://genai.example/v1beta/models/gemini-test:generateContent"
    assert kwargs["params"] == {"key": "test-key"}
    assert kwargs["timeout"] == 3
    assert kwargs["json"]["generationConfig"]["responseMimeType"] == "application/json"


def test_invalid_code_is_dropped_but_text_kept():
    session = FakeSession(FakeResponse(_gemini_body({
        "confirmationNumber": "TOO-LONG-CODE",
        "confirmationMessage": "Booked.",
    })))

    details = _service(session).generate(_request())

    assert details.confirmation_number is None
    assert details.confirmation_message == "Booked."


def test_network_error_returns_none():
    session = FakeSession(error=requests.ConnectionError("down"))
    assert _service(session).generate(_request()) is None


def test_http_error_returns_none():
    session = FakeSession(FakeResponse({}, status_code=503))
    assert _service(session).generate(_request()) is None


def test_malformed_output_returns_none():
    session = FakeSession(FakeResponse({"candidates": []}))
    assert _service(session).generate(_request()) is None

    session = FakeSession(FakeResponse({"candidates": [{"content": {"parts": [{"text": "not json"}]}}]}))
    assert _service(session).generate(_request()) is None

    session = FakeSession(FakeResponse(_gemini_body({"confirmationMessage": ""})))
    assert _service(session).generate(_request()) is None


def test_unconfigured_service_does_not_call_out():
    session = FakeSession(error=AssertionError("must not be called"))
    service = ConfirmationTextService(api_key="", session=session)

    assert service.generate(_request()) is None
    assert session.calls == []


def test_fallback_details():
    details = fallback_details(_request())

    assert details.confirmation_number is None
    assert "Asha Verma" in details.confirmation_message
    assert details.estimated_trip_duration == "approx. 90 minutes"
    assert details.estimated_arrival_time == "2030-05-01 10:00"


def test_confirmation_code_format():
    assert is_valid_confirmation_code("A1B2C3")
    assert not is_valid_confirmation_code("a1b2c3")
    assert not is_valid_confirmation_code("A1B2C")
    assert not is_valid_confirmation_code(None)
