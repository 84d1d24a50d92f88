# backend/tour_planner/core/retry.py

import asyncio
from typing import Optional

from tour_planner.core.config_loader import settings
from tour_planner.core.exceptions import GenerationCancelled


class CancellationToken:
    """One per generation run. Once cancelled it stays cancelled; start a new run with a new token."""

    def __init__(self):
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise GenerationCancelled("Itinerary generation cancelled")

    async def wait(self) -> None:
        await self._event.wait()


class RetryPolicy:
    """
    Bounds the pause_turn continuation loop.

    - max_attempts: total completion calls allowed for one itinerary
    - delay_seconds: pacing wait between a paused response and its continuation

    The policy holds no per-run state and can be shared by every run of an
    agent; cancellation lives on the CancellationToken handed to each run.
    """

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        delay_seconds: Optional[float] = None,
    ):
        self.max_attempts = max_attempts if max_attempts is not None else settings.pause_turn_max_attempts
        self.delay_seconds = delay_seconds if delay_seconds is not None else settings.pause_turn_delay_seconds
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def immediate(cls, max_attempts: int = 5) -> "RetryPolicy":
        return cls(max_attempts=max_attempts, delay_seconds=0)

    @staticmethod
    def token() -> CancellationToken:
        return CancellationToken()

    async def wait(self, token: CancellationToken) -> None:
        """Sleep for the pacing delay unless the token is cancelled first."""
        token.raise_if_cancelled()
        if self.delay_seconds <= 0:
            return

        try:
            await asyncio.wait_for(token.wait(), timeout=self.delay_seconds)
        except asyncio.TimeoutError:
            return

        token.raise_if_cancelled()
