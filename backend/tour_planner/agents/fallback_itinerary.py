# backend/tour_planner/agents/fallback_itinerary.py

from tour_planner.models.itinerary_models import ItineraryDocument


FALLBACK_RAW_TEXT = "Backup response used due to API timeout or failure"


# Canned two-day Paris plan served when the completion endpoint is unreachable.
# Not derived from the trip request and not checked against inventory.
FALLBACK_ITINERARY = {
    "itinerary": {
        "day1": {
            "morning": {
                "timeSlot": "09:00-12:00",
                "experienceId": 3909,
                "vendorId": "headout",
                "tourId": 3909,
                "variantId": 3909,
                "tourGroupName": "Louvre Museum Reserved Access Tickets with Optional Audioguide",
                "variantName": "Reserved Access with Audio Guide",
                "duration": "3h",
                "location": "Louvre Museum, 75001 Paris",
                "notes": "Start early to avoid crowds. Reserved time entry ensures smooth access. Use audio guide for enhanced experience.",
            },
            "afternoon": {
                "timeSlot": "14:00-16:00",
                "experienceId": 6235,
                "vendorId": "headout",
                "tourId": 6235,
                "variantId": 6235,
                "tourGroupName": "Orsay Museum Fast-Track Tickets",
                "variantName": "Fast-Track Entry",
                "duration": "2h",
                "location": "Orsay Museum, 1 Rue de la Légion d'Honneur, 75007 Paris",
                "notes": "Perfect timing after lunch. Focus on Impressionist masterpieces by Monet, Renoir, and Van Gogh.",
            },
            "evening": {
                "timeSlot": "17:30-19:30",
                "experienceId": 23604,
                "vendorId": "headout",
                "tourId": 23604,
                "variantId": 23604,
                "tourGroupName": "Eiffel Tower Guided Tour by Elevator: Summit or Second Floor",
                "variantName": "Guided Tour to Summit",
                "duration": "2h",
                "location": "Eiffel Tower, Champ de Mars, 75007 Paris",
                "notes": "Evening slot offers beautiful lighting and city views. Small group tour with expert guide.",
            },
        },
        "day2": {
            "morning": {
                "timeSlot": "10:00-12:00",
                "experienceId": 8008,
                "vendorId": "headout",
                "tourId": 8008,
                "variantId": 8008,
                "tourGroupName": "Sainte-Chapelle and Conciergerie Tickets",
                "variantName": "Combined Entry Tickets",
                "duration": "2h",
                "location": "Sainte-Chapelle, 10 Bd du Palais, 75001 Paris",
                "notes": "Morning light enhances the stunning stained glass windows. Combined ticket covers both historic sites.",
            },
            "afternoon": {
                "timeSlot": "14:30-16:30",
                "experienceId": 8006,
                "vendorId": "headout",
                "tourId": 8006,
                "variantId": 8006,
                "tourGroupName": "Self-guided tour of Palais Garnier",
                "variantName": "Timed Entry Ticket",
                "duration": "2h",
                "location": "Opera Garnier, Pl. de l'Opéra, 75009 Paris",
                "notes": "Timed entry ensures access to this architectural masterpiece. Explore at your own pace with included access to temporary exhibitions.",
            },
            "evening": {
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
        "optimizationNotes": {
            "crowdAvoidance": "Scheduled early morning starts at major attractions and strategic afternoon timing to minimize wait times. Reserved entry tickets eliminate queuing.",
            "logistics": "Geographically clustered attractions by day - Day 1 focuses on Left Bank museums and Eiffel Tower area, Day 2 covers Île de la Cité and Opera district for efficient travel.",
            "valueOptimization": "Selected experiences include audio guides and reserved access features. Combined tickets for Sainte-Chapelle and Conciergerie provide better value than separate entries.",
            "experienceVariety": "Balanced mix of world-famous museums (Louvre, Orsay), iconic landmarks (Eiffel Tower), religious architecture (Sainte-Chapelle), and performing arts venue (Opera Garnier) for comprehensive Paris experience.",
        },
    }
}


def load_fallback_itinerary() -> ItineraryDocument:
    # parsed fresh each time so callers can never mutate a shared document
    return ItineraryDocument.from_payload(FALLBACK_ITINERARY)
