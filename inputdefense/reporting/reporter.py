"""Policy violation reporter.

Every violation is logged locally. Outside local development the
normalized report is also forwarded to a collector on a background worker;
the caller never waits for it and never sees its failures.
"""

from __future__ import annotations

import json
import logging
import urllib.request
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Mapping, Optional, Union
from urllib.parse import urljoin

from inputdefense.config import DEFAULT_CONFIG, SecurityConfig
from inputdefense.reporting.models import PolicyViolationReport
from inputdefense.session.host import HostEnvironment, is_local_host

logger = logging.getLogger(__name__)

Transport = Callable[[str, dict[str, Any], float], None]


def post_json(url: str, payload: dict[str, Any], timeout: float) -> None:
    """POST *payload* as JSON. Any response body is ignored."""
    body = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url, data=body, headers={"Content-Type": "application/json"}, method="POST"
    )
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        resp.read()


class ViolationReporter:
    """Log and forward security-policy violations.

    Parameters
    ----------
    host : HostEnvironment
        Supplies the hostname, origin and user agent.
    config : SecurityConfig | None
        Collector path, local host names and forward timeout.
    transport : callable | None
        ``transport(url, payload, timeout)``; defaults to :func:`post_json`.
    """

    def __init__(
        self,
        host: HostEnvironment,
        config: Optional[SecurityConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self._host = host
        self._config = (config or DEFAULT_CONFIG).reporting
        self._transport = transport or post_json
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def collector_url(self) -> str:
        return urljoin(self._host.origin, self._config.collector_path)

    @property
    def forwarding_enabled(self) -> bool:
        return not is_local_host(self._host.hostname, self._config.local_hosts)

    def report(
        self, violation: Union[PolicyViolationReport, Mapping[str, Any]]
    ) -> Optional[Future]:
        """Log *violation* and, when deployed, start forwarding it.

        Returns the forward's Future, or None when nothing was forwarded.
        Never raises.
        """
        if not isinstance(violation, PolicyViolationReport):
            violation = PolicyViolationReport.from_event(violation, self._host.user_agent)

        logger.warning(f"CSP Violation: {violation.log_fields()}")

        if not self.forwarding_enabled:
            return None

        payload = violation.to_payload()
        if not payload["userAgent"]:
            payload["userAgent"] = self._host.user_agent
        url = self.collector_url

        try:
            future = self._get_executor().submit(
                self._transport, url, payload, self._config.timeout_seconds
            )
        except RuntimeError as e:
            logger.error(f"Violation forward to {url} not started: {e}")
            return None
        future.add_done_callback(lambda f: self._on_forward_done(url, f))
        return future

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="violation-forward"
            )
        return self._executor

    @staticmethod
    def _on_forward_done(url: str, future: Future) -> None:
        if future.cancelled():
            logger.info(f"Violation forward to {url} cancelled")
            return
        exc = future.exception()
        if exc is not None:
            logger.error(f"Violation forward to {url} failed: {exc}")

    def close(self, wait: bool = True) -> None:
        """Stop the background worker, optionally waiting for pending forwards."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
