from abc import ABC, abstractmethod
from datetime import timedelta
from typing import Any, Callable, Mapping

from greenlight.domain.result import Result


class INotificationTransport(ABC):
    """Delivers a templated message to one recipient"""

    @abstractmethod
    def send(self, recipient: str, template_id: str, data: Mapping[str, Any]) -> Result[None]:
        """Render `template_id` with `data` and deliver it to `recipient`"""
        pass


def notification_task(
    transport: INotificationTransport, recipient: str, template_id: str, data: Mapping[str, Any]
) -> Callable[[], Result[None]]:
    """
    Bind a send to a snapshot of its inputs for the background dispatcher.

    The data mapping is copied so later changes by the request handler
    cannot race with delivery.
    """
    snapshot = dict(data)

    def send_notification() -> Result[None]:
        return transport.send(recipient, template_id, snapshot)

    send_notification.__name__ = f"send_{template_id}"
    return send_notification


def describe_ttl(ttl: timedelta) -> str:
    """Human wording for a token lifetime, e.g. '24 hours' or '3 days'."""
    hours = int(ttl.total_seconds() // 3600)
    if hours >= 48 and hours % 24 == 0:
        return f"{hours // 24} days"
    if hours == 1:
        return "1 hour"
    if hours >= 1:
        return f"{hours} hours"
    minutes = max(int(ttl.total_seconds() // 60), 1)
    return f"{minutes} minutes"
