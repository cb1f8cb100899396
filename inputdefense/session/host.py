"""A minimal model of the page host: event targets, hostname and origin."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

logger = logging.getLogger(__name__)


@dataclass
class PageEvent:
    """An event delivered to listeners on an EventTarget."""

    type: str
    key: str = ""
    ctrl_key: bool = False
    shift_key: bool = False
    detail: dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


Listener = Callable[[PageEvent], None]


class EventTarget:
    """Dispatches events to listeners registered per event type."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)

    def remove_listener(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def listener_count(self, event_type: str) -> int:
        return len(self._listeners.get(event_type, []))

    def dispatch(self, event: PageEvent) -> PageEvent:
        """Call every listener for ``event.type``. A failing listener does not stop the rest."""
        for listener in list(self._listeners.get(event.type, [])):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener for '{event.type}' failed")
        return event


@dataclass(eq=False)
class HostEnvironment:
    """Where the guarded page runs."""

    hostname: str = "localhost"
    origin: str = "http://localhost"
    user_agent: str = ""
    document: EventTarget = field(default_factory=EventTarget)
    window: EventTarget = field(default_factory=EventTarget)
    guard: Optional[Any] = field(default=None, repr=False)


def is_local_host(hostname: str, local_hosts: Iterable[str]) -> bool:
    """True when *hostname* is a local development host."""
    return hostname.strip("[]").lower() in {h.strip("[]").lower() for h in local_hosts}
