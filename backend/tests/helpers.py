# backend/tests/helpers.py

from typing import List

from tour_planner.core.retry import RetryPolicy
from tour_planner.models.conversation_models import CompletionResult


def completion(stop_reason: str, *content: dict) -> CompletionResult:
    return CompletionResult.from_payload({
        "stop_reason": stop_reason,
        "content": list(content) or [{"type": "text", "text": ""}],
        "usage": {"input_tokens": 10, "output_tokens": 20},
    })


def text(value: str) -> dict:
    return {"type": "text", "text": value}


class ScriptedClient:
    """Stands in for AnthropicService; replays results (or raises exceptions) in order."""

    def __init__(self, responses: List):
        self.responses = list(responses)
        self.calls = []

    async def send_message(self, messages, mcp_servers=None, bypass_timeout=False):
        self.calls.append({"messages": list(messages), "bypass_timeout": bypass_timeout})
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        return item


class RecordingRetryPolicy(RetryPolicy):
    def __init__(self, max_attempts: int = 5, delay_seconds: float = 0):
        super().__init__(max_attempts=max_attempts, delay_seconds=delay_seconds)
        self.waits = 0

    async def wait(self, token) -> None:
        self.waits += 1
        await super().wait(token)


def availability(tour_id: int, start_date: str, start_time: str, listing=None, retail=None) -> dict:
    return {
        "startDate": start_date,
        "startTime": start_time,
        "endTime": "",
        "tourId": tour_id,
        "vendorId": 77,
        "priceProfile": {
            "priceProfileType": "PER_PERSON",
            "persons": [{
                "type": "ADULT",
                "retailPrice": retail,
                "listingPrice": listing,
                "extraCharges": 0,
                "isPricingInclusiveOfExtraCharges": False,
                "discount": 0,
            }],
            "groups": [],
            "people": 1,
        },
        "paxAvailability": [],
        "paxValidation": {},
    }


def catalog_payload(experience_id: int, variant_id: int, tour_id: int, name: str = "Louvre Museum") -> dict:
    return {
        "id": experience_id,
        "name": name,
        "city": {
            "displayName": "Paris",
            "country": {"displayName": "France", "currency": {"code": "EUR", "symbol": "€"}},
        },
        "imageUploads": [{"url": "https://img.example/louvre.jpg", "alt": "Louvre", "title": "Pyramid"}],
        "variants": [{
            "id": variant_id,
            "name": "With Audio Guide",
            "productId": experience_id,
            "listingPrice": {"currencyCode": "EUR", "originalPrice": 40, "finalPrice": 35},
            "tours": [{"id": tour_id, "name": "Entry", "duration": 10800000, "minPax": 1, "maxPax": 10}],
        }],
    }
