"""Error taxonomy shared by both verification stages.

Stage 1 BLOCK decisions and low verdicts are results, not errors.
"""

from __future__ import annotations


class VerificationError(RuntimeError):
    """Base class for failures scoped to a single analysis request."""


class InputValidationError(VerificationError):
    """Raised when the submitted content is missing or empty."""


class UpstreamError(VerificationError):
    """Raised when the LLM gateway or news search cannot produce a usable answer."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(UpstreamError):
    """Collaborator answered 429; the request is not retried."""


class PaymentRequiredError(UpstreamError):
    """LLM gateway answered 402."""
