"""Shared constants and payload builders for the API tests."""

import base64

API = "/api"

# Seed order from app.services.lookups
ANNUAL, PERPETUAL, SUBSCRIPTION, TRIAL = 1, 2, 3, 4
AVAILABLE, ACTIVATION_REQUESTED, ACTIVATED, DEACTIVATED = 1, 2, 3, 4


def b64(value: str) -> str:
    """Encode text the way clients send secrets."""
    return base64.b64encode(value.encode()).decode()


def admin_payload(**overrides):
    payload = {
        "firstName": "Ada",
        "lastName": "Admin",
        "login": "ada",
        "email": "ada@acmecorp.com",
        "password": b64("s3cret"),
        "isActive": True,
    }
    payload.update(overrides)
    return payload


def user_payload(customer_id: int, **overrides):
    payload = {
        "customerId": customer_id,
        "firstName": "Uma",
        "lastName": "User",
        "login": "uma",
        "email": "uma@acmecorp.com",
        "password": b64("hunter2"),
        "isActive": True,
    }
    payload.update(overrides)
    return payload
