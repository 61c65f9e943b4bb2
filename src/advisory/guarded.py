"""
Timeout + fallback wrapper around an advisory client.

Every method returns within ``timeout`` seconds and never raises: a missing
client, a slow answer or any error yields the canned fallback value.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from .client import AdvisoryClient, SafetyAssessment
from src.domain.entities import Driver, Passenger, Trip

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_REPLIES = ["Okay", "On my way", "Call driver"]
FALLBACK_SAFETY = SafetyAssessment(
    is_safe=True,
    alert_message=None,
    recommendation="Continuous monitoring enabled.",
)


def fallback_status_update(status: str, eta: str) -> str:
    return f"Update: Your child's ride is currently {status}. Estimated arrival: {eta}."


class GuardedAdvisory:
    def __init__(self, client: Optional[AdvisoryClient], timeout: float = 4.0):
        self.client = client
        self.timeout = timeout

    async def _call(self, name: str, call: Awaitable[T], fallback: T) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.CancelledError:
            raise
        except asyncio.TimeoutError:
            logger.warning("Advisory %s timed out after %.1fs, using fallback", name, self.timeout)
        except Exception:
            logger.warning("Advisory %s failed, using fallback", name, exc_info=True)
        return fallback

    async def suggest_quick_replies(self, trip: Trip, child_name: str) -> list[str]:
        if self.client is None:
            return list(FALLBACK_REPLIES)
        return await self._call(
            "quick replies",
            self.client.suggest_quick_replies(trip, child_name),
            list(FALLBACK_REPLIES),
        )

    async def analyze_safety(
        self, trip: Trip, child: Passenger, driver: Optional[Driver]
    ) -> SafetyAssessment:
        if self.client is None:
            return FALLBACK_SAFETY
        return await self._call(
            "safety analysis",
            self.client.analyze_safety(trip, child, driver),
            FALLBACK_SAFETY,
        )

    async def compose_status_update(self, status: str, eta: str) -> str:
        fallback = fallback_status_update(status, eta)
        if self.client is None:
            return fallback
        return await self._call(
            "status update", self.client.compose_status_update(status, eta), fallback
        )
