"""Tests for policy violation reporting."""

import logging

from inputdefense.reporting.models import PolicyViolationReport
from inputdefense.reporting.reporter import ViolationReporter, is_local_host
from inputdefense.session.host import HostEnvironment

EVENT = {
    "blockedURI": "https://evil.example/x.js",
    "violatedDirective": "script-src",
    "originalPolicy": "default-src 'self'",
    "sourceFile": "https://site.example/app.js",
    "lineNumber": 12,
}


class RecordingTransport:
    def __init__(self, fail: bool = False) -> None:
        self.calls = []
        self.fail = fail

    def __call__(self, url, payload, timeout):
        self.calls.append((url, payload, timeout))
        if self.fail:
            raise ConnectionError("collector unreachable")


def _deployed_host() -> HostEnvironment:
    return HostEnvironment(
        hostname="showcase.example", origin="https://showcase.example", user_agent="TestAgent/1.0"
    )


def test_is_local_host():
    local = ("localhost", "127.0.0.1", "::1")
    assert is_local_host("localhost", local)
    assert is_local_host("LOCALHOST", local)
    assert is_local_host("[::1]", local)
    assert not is_local_host("showcase.example", local)


def test_local_host_logs_without_forwarding(caplog):
    transport = RecordingTransport()
    reporter = ViolationReporter(HostEnvironment(hostname="localhost"), transport=transport)
    with caplog.at_level(logging.WARNING):
        assert reporter.report(EVENT) is None
    assert transport.calls == []
    assert "script-src" in caplog.text
    assert "evil.example" in caplog.text


def test_deployed_host_forwards_payload():
    transport = RecordingTransport()
    reporter = ViolationReporter(_deployed_host(), transport=transport)
    future = reporter.report(EVENT)
    assert future is not None
    future.result(timeout=5)
    reporter.close()

    assert len(transport.calls) == 1
    url, payload, timeout = transport.calls[0]
    assert url == "https://showcase.example/api/security/csp-violation"
    assert set(payload) == {"blockedURI", "violatedDirective", "timestamp", "userAgent"}
    assert payload["blockedURI"] == "https://evil.example/x.js"
    assert payload["violatedDirective"] == "script-src"
    assert payload["userAgent"] == "TestAgent/1.0"
    assert payload["timestamp"]
    assert timeout == 10.0


def test_forward_failure_is_swallowed(caplog):
    transport = RecordingTransport(fail=True)
    reporter = ViolationReporter(_deployed_host(), transport=transport)
    with caplog.at_level(logging.ERROR):
        future = reporter.report(EVENT)
        reporter.close(wait=True)
    assert isinstance(future.exception(), ConnectionError)
    assert "collector unreachable" in caplog.text


def test_report_dataclass_accepted():
    transport = RecordingTransport()
    reporter = ViolationReporter(_deployed_host(), transport=transport)
    report = PolicyViolationReport(blocked_uri="inline", violated_directive="style-src")
    reporter.report(report).result(timeout=5)
    reporter.close()
    assert transport.calls[0][1]["violatedDirective"] == "style-src"


def test_report_from_event_fields():
    report = PolicyViolationReport.from_event(EVENT, user_agent="UA")
    assert report.blocked_uri == "https://evil.example/x.js"
    assert report.original_policy == "default-src 'self'"
    assert report.source_file == "https://site.example/app.js"
    assert report.line_number == 12
    assert report.user_agent == "UA"
    assert report.timestamp

    snake = PolicyViolationReport.from_event({"violated_directive": "img-src", "line_number": "x"})
    assert snake.violated_directive == "img-src"
    assert snake.line_number == 0
