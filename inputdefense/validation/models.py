"""Data models for text and file validation."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional


@dataclass
class ValidationResult:
    """Outcome of validating a free-form string.

    ``sanitized`` is always safe to render, even when ``is_valid`` is False.
    """

    is_valid: bool
    sanitized: str = ""
    errors: list[str] = field(default_factory=list)


@dataclass
class FileValidationResult:
    """Outcome of validating an upload candidate. Accept or reject only."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class FileCandidate:
    """A file offered for upload, described by its reported metadata."""

    name: str
    size: int
    content_type: str = ""

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> FileCandidate:
        """Build a candidate from a ``{name, size, type}`` mapping."""
        return cls(
            name=str(data.get("name", "")),
            size=int(data.get("size", 0)),
            content_type=str(data.get("type", data.get("content_type", ""))),
        )

    @classmethod
    def from_path(cls, path: str | Path, content_type: Optional[str] = None) -> FileCandidate:
        """Describe a file on disk. The MIME type is guessed from the name, not sniffed."""
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or ""
        return cls(name=path.name, size=os.path.getsize(path), content_type=content_type)
