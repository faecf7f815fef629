"""
reCAPTCHA v3 Guard.

Verifies reCAPTCHA v3 tokens against Google's siteverify API and rejects
requests whose score falls below a threshold. Framework-neutral core with a
FastAPI dependency in recaptcha_v3.dependencies.
"""

from recaptcha_v3.config import ReCaptchaV3Settings, get_settings
from recaptcha_v3.exceptions import (
    ConfigurationError,
    ReCaptchaV3Error,
    ReCaptchaV3Rejected,
    RemoteVerificationError,
    TokenError,
)
from recaptcha_v3.types import RejectionReason, Verdict, VerificationResult
from recaptcha_v3.verifier import ReCaptchaV3, extract_token

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ReCaptchaV3",
    "ReCaptchaV3Error",
    "ReCaptchaV3Rejected",
    "ReCaptchaV3Settings",
    "RejectionReason",
    "RemoteVerificationError",
    "TokenError",
    "Verdict",
    "VerificationResult",
    "extract_token",
    "get_settings",
]
