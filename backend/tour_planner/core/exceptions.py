# backend/tour_planner/core/exceptions.py

from typing import Optional


class TourPlannerError(Exception):
    """Base class for every error raised by the planner."""


# ---------------------------------------------------------------------------
# COMPLETION ENDPOINT
# ---------------------------------------------------------------------------
class CommunicationError(TourPlannerError):
    """Transport failure, timeout or non-success status from the completion endpoint."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CompletionTimeout(CommunicationError):
    pass


class MalformedDocument(TourPlannerError):
    """No JSON object could be salvaged from the model output."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class GenerationCancelled(TourPlannerError):
    pass


# ---------------------------------------------------------------------------
# CATALOG / INVENTORY
# ---------------------------------------------------------------------------
class CatalogFetchError(TourPlannerError):
    def __init__(self, experience_id: str, message: str):
        super().__init__(f"Failed to fetch experience {experience_id}: {message}")
        self.experience_id = experience_id


class NoExperiencesResolved(TourPlannerError):
    def __init__(self, message: str = "Failed to fetch any experiences. Please check the experience IDs and try again."):
        super().__init__(message)
