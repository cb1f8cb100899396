"""Validation — sanitization of free-form text and gating of file uploads.

Results are returned as values, never raised, so the calling UI can render
every reason a value was rejected.
"""

from inputdefense.validation.file_validator import validate_file
from inputdefense.validation.models import FileCandidate, FileValidationResult, ValidationResult
from inputdefense.validation.sanitizer import sanitize
from inputdefense.validation.validator import detect_malicious_content, validate_input

__all__ = [
    "FileCandidate",
    "FileValidationResult",
    "ValidationResult",
    "detect_malicious_content",
    "sanitize",
    "validate_file",
    "validate_input",
]
