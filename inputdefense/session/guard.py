"""Page-lifetime session guard.

``initialize`` wires the violation reporter, context-menu and devtools
shortcut suppression, and storage cleanup on unload into a host, and
returns a handle that removes all of it again. A host holds at most one
active guard.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from inputdefense.config import DEFAULT_CONFIG, SecurityConfig
from inputdefense.session.host import EventTarget, HostEnvironment, Listener, PageEvent, is_local_host
from inputdefense.session.tokens import AntiForgeryTokens
from inputdefense.storage.secure_store import SecureStore

if TYPE_CHECKING:
    from inputdefense.reporting.reporter import ViolationReporter

logger = logging.getLogger(__name__)

VIOLATION_EVENT = "securitypolicyviolation"
CONTEXT_MENU_EVENT = "contextmenu"
KEYDOWN_EVENT = "keydown"
UNLOAD_EVENT = "beforeunload"


@dataclass(frozen=True)
class Shortcut:
    key: str
    ctrl: bool = False
    shift: bool = False

    def matches(self, event: PageEvent) -> bool:
        if event.key.lower() != self.key.lower():
            return False
        if not self.ctrl and not self.shift:
            return True
        return event.ctrl_key == self.ctrl and event.shift_key == self.shift


DEVTOOLS_SHORTCUTS: tuple[Shortcut, ...] = (
    Shortcut("F12"),
    Shortcut("I", ctrl=True, shift=True),
    Shortcut("C", ctrl=True, shift=True),
    Shortcut("U", ctrl=True),
    Shortcut("S", ctrl=True),
    Shortcut("A", ctrl=True),
)


@dataclass
class GuardHandle:
    """Listeners installed by :func:`initialize`. Call :meth:`dispose` to remove them.

    Disposing also stops the reporter's background worker without waiting
    for forwards still in flight.
    """

    host: HostEnvironment
    anti_forgery_token: str = ""
    _installed: list[tuple[EventTarget, str, Listener]] = field(default_factory=list, repr=False)
    _reporter: Optional[ViolationReporter] = field(default=None, repr=False)
    _disposed: bool = False

    @property
    def active(self) -> bool:
        return not self._disposed

    def _listen(self, target: EventTarget, event_type: str, listener: Listener) -> None:
        target.add_listener(event_type, listener)
        self._installed.append((target, event_type, listener))

    def dispose(self) -> None:
        if self._disposed:
            return
        for target, event_type, listener in self._installed:
            target.remove_listener(event_type, listener)
        self._installed.clear()
        if self._reporter is not None:
            self._reporter.close(wait=False)
            self._reporter = None
        self._disposed = True
        if self.host.guard is self:
            self.host.guard = None
        logger.debug(f"Session guard removed from {self.host.hostname}")


def _suppress_context_menu(event: PageEvent) -> None:
    event.prevent_default()


def _suppress_devtools_shortcuts(event: PageEvent) -> None:
    for shortcut in DEVTOOLS_SHORTCUTS:
        if shortcut.matches(event):
            event.prevent_default()
            return


def initialize(
    host: HostEnvironment,
    store: SecureStore,
    reporter: Optional[ViolationReporter] = None,
    config: Optional[SecurityConfig] = None,
) -> GuardHandle:
    """Install the session guard on *host* and return its handle.

    Calling this again while a guard is active on the same host returns the
    existing handle instead of installing duplicate listeners.
    """
    existing = host.guard
    if isinstance(existing, GuardHandle) and existing.active:
        logger.debug(f"Session guard already installed on {host.hostname}")
        return existing

    config = config or DEFAULT_CONFIG
    session = config.session
    handle = GuardHandle(host=host, _reporter=reporter)

    if reporter is not None:
        handle._listen(host.document, VIOLATION_EVENT, lambda e: reporter.report(e.detail))

    local = is_local_host(host.hostname, config.reporting.local_hosts)
    if not local and session.suppress_context_menu:
        handle._listen(host.document, CONTEXT_MENU_EVENT, _suppress_context_menu)
    if not local and session.suppress_devtools_shortcuts:
        handle._listen(host.document, KEYDOWN_EVENT, _suppress_devtools_shortcuts)

    if session.clear_storage_on_unload:
        handle._listen(host.window, UNLOAD_EVENT, lambda e: store.clear_all())

    if session.issue_anti_forgery_token:
        tokens = AntiForgeryTokens(store, ttl_seconds=session.anti_forgery_ttl_seconds)
        handle.anti_forgery_token = tokens.issue()

    host.guard = handle
    logger.info(f"Session guard installed on {host.hostname} ({len(handle._installed)} listeners)")
    return handle
