"""Collector-side storage for forwarded violation reports.

Reports are appended as newline-delimited JSON to daily files under
``~/.inputdefense/violations/``.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

CSV_FIELDS = (
    "id",
    "received_at",
    "violated_directive",
    "blocked_uri",
    "timestamp",
    "user_agent",
    "client_ip",
)


@dataclass
class ViolationRecord:
    """A received violation report."""

    id: str
    received_at: str
    blocked_uri: str = ""
    violated_directive: str = ""
    timestamp: str = ""
    user_agent: str = ""
    client_ip: str = ""


class ViolationLog:
    """File-based JSON log of received violation reports."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir else Path.home() / ".inputdefense" / "violations"
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def _log_file_for_date(self, dt: datetime) -> Path:
        return self._base_dir / f"{dt.strftime('%Y-%m-%d')}.jsonl"

    def _read_all(self) -> list[ViolationRecord]:
        records: list[ViolationRecord] = []
        for path in sorted(self._base_dir.glob("*.jsonl")):
            for line in path.read_text(encoding="utf-8").splitlines():
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(ViolationRecord(**json.loads(line)))
                except (json.JSONDecodeError, TypeError) as e:
                    logger.warning(f"Skipping malformed line in {path.name}: {e}")
        return records

    def record(
        self,
        blocked_uri: str,
        violated_directive: str,
        timestamp: str = "",
        user_agent: str = "",
        client_ip: str = "",
    ) -> ViolationRecord:
        """Append a report and return the stored record."""
        now = datetime.now(timezone.utc)
        entry = ViolationRecord(
            id=uuid.uuid4().hex[:16],
            received_at=now.isoformat(),
            blocked_uri=blocked_uri,
            violated_directive=violated_directive,
            timestamp=timestamp,
            user_agent=user_agent,
            client_ip=client_ip,
        )
        with self._log_file_for_date(now).open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(asdict(entry)) + "\n")
        return entry

    def get_events(
        self,
        *,
        directive: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        limit: int = 200,
    ) -> list[ViolationRecord]:
        """Return received reports, newest first."""
        records = self._read_all()
        if directive:
            records = [r for r in records if r.violated_directive == directive]
        if start_date:
            records = [r for r in records if r.received_at >= start_date]
        if end_date:
            records = [r for r in records if r.received_at <= end_date]
        records.sort(key=lambda r: r.received_at, reverse=True)
        return records[:limit]

    def export_events(self, fmt: str = "json", *, directive: Optional[str] = None, limit: int = 10000) -> str:
        """Export reports as ``json`` or ``csv``."""
        records = self.get_events(directive=directive, limit=limit)

        if fmt == "csv":
            buf = io.StringIO()
            writer = csv.writer(buf, lineterminator="\n")
            writer.writerow(CSV_FIELDS)
            for r in records:
                writer.writerow([getattr(r, name) for name in CSV_FIELDS])
            return buf.getvalue().rstrip("\n")

        return json.dumps([asdict(r) for r in records], indent=2)
