"""
Mock objects and utilities for Quote Client tests
Provides recording fakes for the mutation controller's collaborators
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from yarl import URL

from mutation.collaborators import NotificationKind, Placement
from utils.cache import QueryCache


class RecordingNotifier:
    """Notifier that keeps every notification"""

    def __init__(self):
        self.calls: List[Tuple[str, NotificationKind, Placement]] = []

    def notify(self, message: str, kind: NotificationKind, placement: Placement) -> None:
        self.calls.append((message, kind, placement))

    @property
    def messages(self) -> List[str]:
        return [message for message, _, _ in self.calls]

    def of_kind(self, kind: NotificationKind) -> List[str]:
        return [message for message, k, _ in self.calls if k is kind]


class RecordingProgress:
    """Progress indicator that records start/done transitions"""

    def __init__(self):
        self.events: List[str] = []

    def start(self) -> None:
        self.events.append("start")

    def done(self) -> None:
        self.events.append("done")


class RecordingCache(QueryCache):
    """QueryCache that records invalidated keys"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.invalidated: List[str] = []

    def invalidate(self, key: str) -> bool:
        self.invalidated.append(key)
        return super().invalidate(key)


class ControlledMutation:
    """Awaitable mutation function whose completion the test controls"""

    def __init__(self, result: Any = None, error: Optional[BaseException] = None):
        self.result = result
        self.error = error
        self.calls: List[Any] = []
        self.release = asyncio.Event()

    async def __call__(self, value: Any) -> Any:
        self.calls.append(value)
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result


def recorded_requests(http_mock, method: str, url: str) -> list:
    """Return the calls aioresponses recorded for method/url"""
    return http_mock.requests.get((method, URL(url)), [])


def quote_envelope(quote: Dict[str, Any], status: str = "success") -> Dict[str, Any]:
    return {"status": status, "quote": quote}
