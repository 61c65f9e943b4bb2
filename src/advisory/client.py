"""
Advisory service client.

The advisory service is an external text generator (smart replies, safety
commentary, guardian SMS wording).  The core never depends on it: every
call goes through ``GuardedAdvisory`` which supplies local fallbacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from src.domain.entities import Driver, Passenger, Trip


@dataclass(frozen=True)
class SafetyAssessment:
    is_safe: bool
    alert_message: Optional[str]
    recommendation: str


class AdvisoryClient(Protocol):
    async def suggest_quick_replies(self, trip: Trip, child_name: str) -> list[str]: ...

    async def analyze_safety(
        self, trip: Trip, child: Passenger, driver: Optional[Driver]
    ) -> SafetyAssessment: ...

    async def compose_status_update(self, status: str, eta: str) -> str: ...


class HttpAdvisoryClient:
    """JSON-over-HTTP client for a hosted advisory endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.http = http or httpx.AsyncClient(base_url=base_url, headers=headers)

    async def _post(self, path: str, body: dict) -> dict:
        resp = await self.http.post(path, json=body)
        resp.raise_for_status()
        return resp.json()

    async def suggest_quick_replies(self, trip: Trip, child_name: str) -> list[str]:
        data = await self._post(
            "/quick-replies",
            {
                "status": trip.status.value,
                "child_name": child_name,
                "signal": trip.coordination_signal.value
                if trip.coordination_signal
                else None,
            },
        )
        replies = [str(r) for r in data.get("replies", [])]
        if len(replies) < 3:
            raise ValueError(f"Expected 3 quick replies, got {len(replies)}")
        return replies[:3]

    async def analyze_safety(
        self, trip: Trip, child: Passenger, driver: Optional[Driver]
    ) -> SafetyAssessment:
        data = await self._post(
            "/safety",
            {
                "status": trip.status.value,
                "child": {"name": child.name, "age": child.age},
                "driver": {"name": driver.name, "vehicle": driver.vehicle}
                if driver
                else None,
                "lat": trip.current_lat,
                "lng": trip.current_lng,
                "route_deviation": trip.route_deviation,
            },
        )
        return SafetyAssessment(
            is_safe=bool(data["isSafe"]),
            alert_message=data.get("alertMessage"),
            recommendation=str(data["recommendation"]),
        )

    async def compose_status_update(self, status: str, eta: str) -> str:
        data = await self._post("/status-update", {"status": status, "eta": eta})
        text = str(data.get("text", "")).strip()
        if not text:
            raise ValueError("Empty status update")
        return text

    async def aclose(self) -> None:
        await self.http.aclose()
