"""
FastAPI integration for reCAPTCHA v3 verification.

ReCaptchaV3Guard runs the verifier's handler as a route dependency. The token
is read from a JSON or form body field, falling back to the header. A
rejection is raised as ReCaptchaV3Rejected; install_exception_handler()
renders it as {"error": message} with the configured status code.

Usage:
    recaptcha = ReCaptchaV3.from_env()
    install_exception_handler(app)

    @router.post("/contact")
    async def contact(score: float = Depends(ReCaptchaV3Guard(recaptcha, threshold=0.7))):
        ...
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from recaptcha_v3.exceptions import ReCaptchaV3Rejected
from recaptcha_v3.verifier import ReCaptchaV3

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class _RequestView:
    """Framework-neutral view of a Starlette request."""

    body: Optional[Mapping[str, Any]]
    headers: Mapping[str, str]
    recaptcha_v3_score: Optional[float] = None


async def read_body(request: Request) -> Optional[Mapping[str, Any]]:
    """Return a JSON object or form body as a mapping, or None for anything else."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        try:
            return await request.form()
        except (MultiPartException, HTTPException) as e:
            logger.debug(f"Ignoring unreadable form body while looking for a reCAPTCHA token: {e}")
            return None
    if not content_type.startswith("application/json"):
        return None
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug("Ignoring unreadable JSON body while looking for a reCAPTCHA token")
        return None
    return data if isinstance(data, Mapping) else None


class ReCaptchaV3Guard:
    """Route dependency that admits a request or raises ReCaptchaV3Rejected."""

    def __init__(
        self,
        verifier: ReCaptchaV3,
        threshold: float | None = None,
        status_code: int | None = None,
        message: str | None = None,
    ):
        self.verifier = verifier
        self._handler = verifier.middleware(threshold, status_code, message)

    async def __call__(self, request: Request) -> float:
        view = _RequestView(body=await read_body(request), headers=request.headers)

        def respond(status_code: int, payload: dict[str, Any]):
            raise ReCaptchaV3Rejected(payload["error"], status_code)

        await self._handler(view, respond, lambda: None)

        request.state.recaptcha_v3_score = view.recaptcha_v3_score
        return view.recaptcha_v3_score


async def recaptcha_rejected_handler(request: Request, exc: ReCaptchaV3Rejected) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def install_exception_handler(app: FastAPI) -> None:
    """Render ReCaptchaV3Rejected as a JSON error response."""
    app.add_exception_handler(ReCaptchaV3Rejected, recaptcha_rejected_handler)
