"""Fake visibility service for testing.

Records listen calls; the test plays the visibility engine by calling
``report`` with a state.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional


@dataclass
class ListenCall:
    """One recorded ``listen_root`` / ``listen_element`` call."""

    element: Any
    spec: Any
    ready: Optional[Awaitable[Any]]
    create_report_ready: Optional[Callable[[], Awaitable[Any]]]
    callback: Callable[[dict[str, Any]], None]
    unlisten_count: int = field(default=0)

    @property
    def unlistened(self) -> bool:
        return self.unlisten_count > 0

    def report(self, state: Optional[dict[str, Any]] = None) -> None:
        """Report a qualifying visibility state through the callback."""
        self.callback(dict(state or {}))


class FakeVisibilityService:
    """In-memory fake for VisibilityService."""

    def __init__(self) -> None:
        """Initialize with no listen calls."""
        self.root_calls: list[ListenCall] = []
        self.element_calls: list[ListenCall] = []

    def _record(self, calls: list[ListenCall], call: ListenCall) -> Callable[[], None]:
        calls.append(call)

        def unlisten() -> None:
            call.unlisten_count += 1

        return unlisten

    def listen_root(
        self,
        spec: Any,
        ready: Optional[Awaitable[Any]],
        create_report_ready: Optional[Callable[[], Awaitable[Any]]],
        callback: Callable[[dict[str, Any]], None],
    ) -> Callable[[], None]:
        """Record a root listen call."""
        return self._record(
            self.root_calls, ListenCall(None, spec, ready, create_report_ready, callback)
        )

    def listen_element(
        self,
        element: Any,
        spec: Any,
        ready: Optional[Awaitable[Any]],
        create_report_ready: Optional[Callable[[], Awaitable[Any]]],
        callback: Callable[[dict[str, Any]], None],
    ) -> Callable[[], None]:
        """Record an element listen call."""
        return self._record(
            self.element_calls, ListenCall(element, spec, ready, create_report_ready, callback)
        )
