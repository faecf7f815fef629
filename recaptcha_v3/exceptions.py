"""
Errors raised by the reCAPTCHA v3 verifier.

Every error carries the HTTP status code the caller should answer with.
"""

from recaptcha_v3.constants import FORBIDDEN


class ReCaptchaV3Error(Exception):
    """Base error with status code."""

    def __init__(self, message: str, status_code: int = FORBIDDEN):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(ReCaptchaV3Error, ValueError):
    """Raised when the secret key or score threshold is invalid."""
    pass


class TokenError(ReCaptchaV3Error):
    """Raised when a request carries no usable token."""
    pass


class RemoteVerificationError(ReCaptchaV3Error):
    """Raised when the siteverify call fails or returns an unusable body."""
    pass


class ReCaptchaV3Rejected(ReCaptchaV3Error):
    """Raised by the FastAPI guard to turn a rejection into an error response."""
    pass
