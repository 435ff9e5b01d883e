"""Event source HTTP client for fetching transaction events and obligations"""

from datetime import datetime, timezone
from typing import Any, Dict, List

import httpx

from ledgerlens.config import settings
from ledgerlens.domain.exceptions import EventSourceError
from ledgerlens.domain.models import Direction, GroupKey, MonetaryEvent, Obligation


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _to_event(raw: Dict[str, Any]) -> MonetaryEvent:
    return MonetaryEvent(
        timestamp=_parse_timestamp(raw["timestamp"]),
        amount=float(raw["amount"]),
        direction=Direction(raw["direction"]),
        group_key=GroupKey(name=raw["group"], category=raw.get("category")),
        tags=tuple(raw.get("tags", [])),
    )


class EventSourceClient:
    """Client for the persistence service that owns users' events and obligations"""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = base_url or settings.event_source_base
        self.timeout = timeout or settings.http_timeout_seconds

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.base_url}{path}", params=params)
                response.raise_for_status()
                return response.json()
            except httpx.TimeoutException as e:
                raise EventSourceError(f"Event source timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise EventSourceError(f"Event source error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise EventSourceError(f"Event source unreachable: {e}") from e

    async def get_events(self, user_id: str, window_days: int) -> List[MonetaryEvent]:
        """
        Fetch a user's events for the trailing window.

        Raises:
            EventSourceError: On timeout, HTTP errors, or invalid response
        """
        data = await self._get("/events", {"user_id": user_id, "window_days": window_days})
        try:
            return [_to_event(raw) for raw in data.get("events", [])]
        except (KeyError, ValueError, TypeError) as e:
            raise EventSourceError(f"Invalid event data from source: {e}") from e

    async def get_obligations(self, user_id: str) -> List[Obligation]:
        data = await self._get("/obligations", {"user_id": user_id})
        try:
            return [
                Obligation(
                    amount=float(raw["amount"]),
                    days_until_due=int(raw["days_until_due"]),
                    name=raw.get("name", ""),
                )
                for raw in data.get("obligations", [])
            ]
        except (KeyError, ValueError, TypeError) as e:
            raise EventSourceError(f"Invalid obligation data from source: {e}") from e

    async def get_balance(self, user_id: str) -> float:
        data = await self._get("/balance", {"user_id": user_id})
        try:
            return float(data["balance"])
        except (KeyError, ValueError, TypeError) as e:
            raise EventSourceError(f"Invalid balance data from source: {e}") from e
