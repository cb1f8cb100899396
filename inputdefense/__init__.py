"""inputdefense — client-side input defense utilities.

Sanitization and validation of free-form text, upload gating, fixed-window
rate limiting, namespaced storage, and policy-violation reporting.
"""

__version__ = "0.1.0"
