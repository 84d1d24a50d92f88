# backend/tests/conftest.py

import pytest


@pytest.fixture
def itinerary_payload():
    return {
        "itinerary": {
            "day1": {
                "morning": {
                    "timeSlot": "09:00-12:00",
                    "experienceId": 101,
                    "vendorId": "headout",
                    "tourId": 1001,
                    "variantId": 501,
                    "tourGroupName": "Louvre Reserved Access",
                    "variantName": "With Audio Guide",
                    "duration": "3h",
                    "location": "Louvre Museum",
                    "notes": "Go early",
                },
                "afternoon": {
                    "timeSlot": "",
                    "experienceId": 0,
                    "vendorId": "",
                    "tourId": 0,
                    "variantId": 0,
                    "tourGroupName": "",
                    "variantName": "",
                    "duration": "",
                    "location": "",
                    "notes": "",
                },
            },
            "day2": {
                "evening": {
                    "timeSlot": "6:00PM - 7:30PM",
                    "experienceId": 202,
                    "vendorId": "headout",
                    "tourId": 2002,
                    "variantId": 602,
                    "tourGroupName": "Seine Cruise",
                    "variantName": "Evening Cruise",
                    "duration": "1h 30m",
                    "location": "Port de la Bourdonnais",
                    "notes": "Sunset views",
                },
            },
            "optimizationNotes": {
                "crowdAvoidance": "Early starts",
                "logistics": "Clustered by area",
                "valueOptimization": "Combined tickets",
                "experienceVariety": "Museums and cruises",
            },
        }
    }
