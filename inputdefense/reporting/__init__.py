"""Reporting — policy-violation logging, best-effort forwarding and collection."""

from inputdefense.reporting.models import PolicyViolationReport
from inputdefense.reporting.reporter import ViolationReporter, is_local_host
from inputdefense.reporting.violation_log import ViolationLog, ViolationRecord

__all__ = [
    "PolicyViolationReport",
    "ViolationLog",
    "ViolationRecord",
    "ViolationReporter",
    "is_local_host",
]
