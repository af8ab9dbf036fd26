"""VisibilityService protocol.

The viewport-intersection engine is a collaborator: it owns thresholds,
minimum visible time and the reported state. Trackers only hand it the visibility spec,
a readiness gate and the callback that turns a qualifying state into an event.
"""

from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

ReadyReportFactory = Callable[[], Awaitable[Any]]
VisibilityCallback = Callable[[dict[str, Any]], None]


@runtime_checkable
class VisibilityService(Protocol):
    """Protocol for root and element visibility listening."""

    def listen_root(
        self,
        spec: Any,
        ready: Optional[Awaitable[Any]],
        create_report_ready: Optional[ReadyReportFactory],
        callback: VisibilityCallback,
    ) -> Callable[[], None]:
        """Listen for visibility of the whole root.

        Args:
            spec: Visibility spec (thresholds etc.), passed through untouched.
            ready: Gate that must resolve before anything is reportable, or None.
            create_report_ready: Factory of a promise that must resolve before a
                report is sent, or None.
            callback: Receives the visibility state of each qualifying event.

        Returns:
            Callable that stops listening.
        """
        ...

    def listen_element(
        self,
        element: Any,
        spec: Any,
        ready: Optional[Awaitable[Any]],
        create_report_ready: Optional[ReadyReportFactory],
        callback: VisibilityCallback,
    ) -> Callable[[], None]:
        """Listen for visibility of ``element``. Same contract as ``listen_root``."""
        ...
