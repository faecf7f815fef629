"""
Data models for reCAPTCHA v3 verification.

SiteVerifyResponse mirrors the JSON body returned by Google. VerificationResult
and Verdict are the values passed between the verifier and the middleware.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SiteVerifyResponse(BaseModel):
    """Body of a siteverify response. Only success and score drive decisions."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: bool = False
    score: Optional[float] = None
    action: Optional[str] = None
    challenge_ts: Optional[str] = None
    hostname: Optional[str] = None
    error_codes: list[str] = Field(default_factory=list, alias="error-codes")


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of one siteverify call, exactly as reported by Google."""

    success: bool
    score: Optional[float] = None


class RejectionReason(str, Enum):
    """Why a request was not admitted."""

    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    REMOTE_ERROR = "remote_error"
    UNSUCCESSFUL = "unsuccessful"
    LOW_SCORE = "low_score"


@dataclass(frozen=True)
class Verdict:
    """
    Admission decision for a single request.

    Exactly one of score (admitted) or reason (rejected) is meaningful;
    a rejected verdict may still carry the score Google returned.
    """

    admitted: bool
    score: Optional[float] = None
    reason: Optional[RejectionReason] = None

    @classmethod
    def admit(cls, score: float) -> "Verdict":
        return cls(admitted=True, score=score)

    @classmethod
    def reject(cls, reason: RejectionReason, score: Optional[float] = None) -> "Verdict":
        return cls(admitted=False, score=score, reason=reason)
