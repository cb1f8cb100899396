"""Upload gating by size, reported MIME type, extension and file name.

Only metadata is inspected; the MIME type is trusted as reported.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Mapping, Optional, Union

from inputdefense.config import DEFAULT_CONFIG, SecurityConfig
from inputdefense.validation.models import FileCandidate, FileValidationResult

logger = logging.getLogger(__name__)

INVALID_METADATA_ERROR = "Invalid file metadata"

_SUSPICIOUS_NAME_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"\.(exe|bat|cmd|com|pif|scr|vbs|js|jar|app|deb|pkg|dmg)\Z", re.IGNORECASE),
    re.compile(r"^(con|prn|aux|nul|com[1-9]|lpt[1-9])(\.|\Z)", re.IGNORECASE),
    re.compile(r'[<>:"|?*]'),
    re.compile(r"^\."),
    re.compile(r"\s+\Z"),
]


def _extension(name: str) -> str:
    return "." + name.rsplit(".", 1)[-1].lower()


def _has_multiple_extensions(name: str) -> bool:
    return name.count(".") > 1 and len(name.split(".")) > 2


def validate_file(
    candidate: Union[FileCandidate, Mapping[str, Any]],
    config: Optional[SecurityConfig] = None,
) -> FileValidationResult:
    """Check an upload candidate against the upload policy.

    Every check runs; errors accumulate in check order.
    """
    config = config or DEFAULT_CONFIG
    policy = config.file_upload
    if not isinstance(candidate, FileCandidate):
        try:
            candidate = FileCandidate.from_mapping(candidate)
        except (TypeError, ValueError, OverflowError, AttributeError) as e:
            logger.debug(f"Rejecting upload candidate with bad metadata: {e}")
            return FileValidationResult(is_valid=False, errors=[INVALID_METADATA_ERROR])

    errors: list[str] = []
    name = candidate.name

    if candidate.size > policy.max_size:
        errors.append(
            f"File size exceeds maximum limit of {policy.max_size / 1024 / 1024:.1f}MB"
        )

    if candidate.content_type not in policy.allowed_types:
        errors.append("File type not allowed")

    if _extension(name) not in policy.allowed_extensions:
        errors.append("File extension not allowed")

    for pattern in _SUSPICIOUS_NAME_PATTERNS:
        if pattern.search(name):
            errors.append("Suspicious file name detected")
            break

    if _has_multiple_extensions(name):
        errors.append("Multiple file extensions not allowed")

    return FileValidationResult(is_valid=not errors, errors=errors)
