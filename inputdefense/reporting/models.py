"""Data model for security-policy violation reports."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class PolicyViolationReport:
    """A single policy violation as delivered by the host."""

    blocked_uri: str = ""
    violated_directive: str = ""
    original_policy: str = ""
    source_file: str = ""
    line_number: int = 0
    timestamp: str = ""
    user_agent: str = ""

    @classmethod
    def from_event(cls, detail: Mapping[str, Any], user_agent: str = "") -> PolicyViolationReport:
        """Build a report from violation event fields (camelCase or snake_case)."""

        def pick(camel: str, snake: str, default: Any = "") -> Any:
            if camel in detail:
                return detail[camel]
            return detail.get(snake, default)

        try:
            line_number = int(pick("lineNumber", "line_number", 0) or 0)
        except (TypeError, ValueError):
            line_number = 0

        return cls(
            blocked_uri=str(pick("blockedURI", "blocked_uri")),
            violated_directive=str(pick("violatedDirective", "violated_directive")),
            original_policy=str(pick("originalPolicy", "original_policy")),
            source_file=str(pick("sourceFile", "source_file")),
            line_number=line_number,
            timestamp=str(pick("timestamp", "timestamp")) or datetime.now(timezone.utc).isoformat(),
            user_agent=str(pick("userAgent", "user_agent")) or user_agent,
        )

    def log_fields(self) -> dict[str, Any]:
        return {
            "blockedURI": self.blocked_uri,
            "violatedDirective": self.violated_directive,
            "originalPolicy": self.original_policy,
            "sourceFile": self.source_file,
            "lineNumber": self.line_number,
        }

    def to_payload(self, now: Optional[datetime] = None) -> dict[str, str]:
        """The normalized payload sent to the collector."""
        now = now or datetime.now(timezone.utc)
        return {
            "blockedURI": self.blocked_uri,
            "violatedDirective": self.violated_directive,
            "timestamp": now.isoformat(),
            "userAgent": self.user_agent,
        }
