"""Free-form text validation.

Combines a length limit, a character allow-list, markup sanitization and a
heuristic scan for dangerous markup. The scan is a best-effort flag layered
on top of the sanitizer; the sanitizer is what makes the output safe.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Optional

from inputdefense.config import DEFAULT_CONFIG, SecurityConfig
from inputdefense.validation.models import ValidationResult
from inputdefense.validation.sanitizer import sanitize

# Checked in order; the first hit wins.
_DANGEROUS_PATTERNS: list[re.Pattern[str]] = [
    re.compile(p, re.IGNORECASE)
    for p in [
        r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>",
        r"javascript:",
        r"on\w+\s*=",
        r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>",
        r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>",
        r"<embed\b[^<]*(?:(?!</embed>)<[^<]*)*</embed>",
    ]
]

# An entity cut short by truncation, e.g. "&l" left over from "&lt;".
_PARTIAL_ENTITY = re.compile(r"&[#a-zA-Z0-9]*\Z")

INVALID_TYPE_ERROR = "Invalid input type"
INVALID_CHARACTERS_ERROR = "Input contains invalid characters"
MALICIOUS_CONTENT_ERROR = "Potentially malicious content detected"


@lru_cache(maxsize=8)
def _allow_list(pattern: str) -> re.Pattern[str]:
    # ASCII keeps \s to space, tab and the line breaks.
    return re.compile(pattern, re.ASCII)


def detect_malicious_content(text: str) -> bool:
    """Return True if *text* matches any known dangerous markup pattern."""
    return any(pattern.search(text) for pattern in _DANGEROUS_PATTERNS)


def _clamp(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return _PARTIAL_ENTITY.sub("", text[:limit])


def validate_input(
    value: Any,
    max_length: Optional[int] = None,
    config: Optional[SecurityConfig] = None,
) -> ValidationResult:
    """Validate a free-form string and return a sanitized copy.

    Errors accumulate in a fixed order: length, characters, malicious
    content. Non-string or empty input short-circuits with a single error.
    """
    config = config or DEFAULT_CONFIG

    if not isinstance(value, str) or not value:
        return ValidationResult(is_valid=False, sanitized="", errors=[INVALID_TYPE_ERROR])

    errors: list[str] = []
    working = value

    limit = max_length or config.validation.max_input_length
    if len(value) > limit:
        errors.append(f"Input exceeds maximum length of {limit} characters")
        working = value[:limit]

    if not _allow_list(config.validation.allowed_characters).match(value):
        errors.append(INVALID_CHARACTERS_ERROR)

    sanitized = _clamp(sanitize(working), limit)

    if detect_malicious_content(value):
        errors.append(MALICIOUS_CONTENT_ERROR)

    return ValidationResult(is_valid=not errors, sanitized=sanitized, errors=errors)
