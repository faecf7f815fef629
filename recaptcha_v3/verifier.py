"""
reCAPTCHA v3 verifier.

Checks client tokens against Google's siteverify endpoint and builds request
handlers that admit a request only when Google reports success and the score
meets the threshold.

Usage:
    recaptcha = ReCaptchaV3(secret_key="...", threshold=0.5)
    handler = recaptcha.middleware(custom_threshold=0.7)
    await handler(request, respond, call_next)
"""

import inspect
from collections.abc import Mapping
from typing import Any, Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from recaptcha_v3.config import ReCaptchaV3Settings, check_threshold, get_settings
from recaptcha_v3.constants import SCORE_ATTRIBUTE, TOKEN_BODY_FIELD, TOKEN_HEADER
from recaptcha_v3.exceptions import ConfigurationError, RemoteVerificationError, TokenError
from recaptcha_v3.interfaces import Continuation, Handler, RequestContext, Responder
from recaptcha_v3.types import RejectionReason, SiteVerifyResponse, Verdict, VerificationResult
from recaptcha_v3.utils.http import create_async_client


def _configuration_error(exc: ValidationError) -> ConfigurationError:
    """Unwrap the ConfigurationError raised inside a settings validator."""
    for error in exc.errors():
        original = error.get("ctx", {}).get("error")
        if isinstance(original, ConfigurationError):
            return original
        if error.get("type") == "missing" and tuple(error.get("loc", ())) == ("secret_key",):
            return ConfigurationError("Invalid secret key: it must be a non-empty string")
    return ConfigurationError(f"Invalid reCAPTCHA configuration: {exc}")


def extract_token(request: RequestContext) -> Optional[Any]:
    """
    Find the client token on a request.

    The body field wins; the header is only consulted when the body has no
    token. Header lookup falls back to a case-insensitive scan for plain dicts.
    """
    body = getattr(request, "body", None)
    if isinstance(body, Mapping):
        token = body.get(TOKEN_BODY_FIELD)
        if token:
            return token

    headers = getattr(request, "headers", None)
    if not headers:
        return None

    token = headers.get(TOKEN_HEADER)
    if token is None:
        for key, value in headers.items():
            if key.lower() == TOKEN_HEADER:
                token = value
                break
    return token or None


async def _resolve(value):
    if inspect.isawaitable(value):
        return await value
    return value


class ReCaptchaV3:
    """
    Verifies reCAPTCHA v3 tokens for one site secret.

    Configuration is validated once and never changes afterwards, so a
    single instance can serve concurrent requests.
    """

    def __init__(
        self,
        settings: ReCaptchaV3Settings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        **overrides,
    ):
        """
        Initialize the verifier.

        Args:
            settings: Pre-built settings; keyword overrides are applied on top
            http_client: Optional shared HTTP client
            **overrides: secret_key, threshold, status_code, message, api_endpoint.
                A threshold given here must be a number; only settings loaded
                from the environment parse strings.

        Raises:
            ConfigurationError: if the secret key or threshold is invalid
        """
        if "threshold" in overrides:
            check_threshold(overrides["threshold"])

        try:
            if settings is None:
                settings = ReCaptchaV3Settings(**overrides)
            elif overrides:
                settings = ReCaptchaV3Settings(**{**settings.model_dump(), **overrides})
        except ValidationError as e:
            raise _configuration_error(e) from None

        self._settings = settings
        self._http_client = http_client
        self._owns_client = False

    @classmethod
    def from_env(cls, http_client: httpx.AsyncClient | None = None) -> "ReCaptchaV3":
        """Build a verifier from RECAPTCHA_* environment variables."""
        try:
            settings = get_settings()
        except ValidationError as e:
            raise _configuration_error(e) from None
        return cls(settings, http_client=http_client)

    async def __aenter__(self):
        """Keep one HTTP client open for the lifetime of the context."""
        if self._http_client is None:
            self._http_client = create_async_client()
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_client and self._http_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False

    @property
    def settings(self) -> ReCaptchaV3Settings:
        return self._settings

    @property
    def secret_key(self) -> str:
        return self._settings.secret_key

    @property
    def threshold(self) -> float:
        return self._settings.threshold

    @property
    def status_code(self) -> int:
        return self._settings.status_code

    @property
    def message(self) -> str:
        return self._settings.message

    @property
    def api_endpoint(self) -> str:
        return self._settings.api_endpoint

    async def _post(self, params: dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(self.api_endpoint, params=params)
        async with create_async_client() as client:
            return await client.post(self.api_endpoint, params=params)

    async def verify(self, token) -> VerificationResult:
        """
        Verify a token with Google's siteverify API.

        Sends a single POST with secret and response as query parameters and
        no body. No retries.

        Args:
            token: Token produced by grecaptcha.execute() on the client

        Returns:
            VerificationResult with success and score as reported by Google

        Raises:
            TokenError: if the token is missing, not a string, or blank
            RemoteVerificationError: on transport failure, HTTP error status,
                an unreadable body, or any other failure of the call
        """
        if not isinstance(token, str) or not token.strip():
            raise TokenError("Invalid token: it must be a non-empty string", self.status_code)

        params = {"secret": self.secret_key, "response": token}

        try:
            response = await self._post(params)
            response.raise_for_status()
            payload = SiteVerifyResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"reCAPTCHA API returned status {status}")
            raise RemoteVerificationError(
                f"reCAPTCHA API returned status {status}", self.status_code
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"reCAPTCHA HTTP error: {e}")
            raise RemoteVerificationError(
                str(e) or "Failed to communicate with reCAPTCHA API", self.status_code
            ) from e
        except ValueError as e:
            # json.JSONDecodeError and pydantic.ValidationError
            logger.error(f"reCAPTCHA API returned an unreadable body: {e}")
            raise RemoteVerificationError(
                "reCAPTCHA API returned an unreadable body", self.status_code
            ) from e
        except Exception as e:
            logger.error(f"reCAPTCHA verification error: {e}")
            raise RemoteVerificationError(
                "Failed to communicate with reCAPTCHA API", self.status_code
            ) from e

        if payload.error_codes:
            logger.warning(f"reCAPTCHA verification reported errors: {payload.error_codes}")

        return VerificationResult(success=payload.success, score=payload.score)

    async def evaluate(self, token, threshold: float | None = None) -> Verdict:
        """
        Decide whether a token admits its request.

        Per-request failures come back as rejected verdicts instead of
        exceptions. An explicit threshold is validated first and raises
        ConfigurationError when out of range.
        """
        threshold = self.threshold if threshold is None else check_threshold(threshold)

        try:
            result = await self.verify(token)
        except TokenError as e:
            logger.warning(f"reCAPTCHA rejected: {e.message}")
            return Verdict.reject(RejectionReason.INVALID_TOKEN)
        except RemoteVerificationError as e:
            logger.warning(f"reCAPTCHA rejected: verification call failed ({e.message})")
            return Verdict.reject(RejectionReason.REMOTE_ERROR)

        if not result.success:
            logger.warning("reCAPTCHA rejected: Google reported an unsuccessful verification")
            return Verdict.reject(RejectionReason.UNSUCCESSFUL, result.score)

        if result.score is None or result.score < threshold:
            logger.warning(f"reCAPTCHA rejected: score {result.score} below threshold {threshold}")
            return Verdict.reject(RejectionReason.LOW_SCORE, result.score)

        logger.debug(f"reCAPTCHA admitted with score {result.score} (threshold {threshold})")
        return Verdict.admit(result.score)

    def middleware(
        self,
        custom_threshold: float | None = None,
        custom_status_code: int | None = None,
        custom_message: str | None = None,
    ) -> Handler:
        """
        Build a request handler.

        None means "use the instance default" for every argument, so a custom
        threshold of 0 is honoured. The custom threshold is validated here,
        before any request arrives.

        The returned coroutine function takes (request, respond, call_next).
        On rejection it calls respond(status_code, {"error": message}) and
        never calls call_next. On admission it sets request.recaptcha_v3_score
        and calls call_next() once. Whatever respond/call_next return (awaited
        if needed) is returned.

        Raises:
            ConfigurationError: if custom_threshold is not a number in [0, 1]
        """
        threshold = self.threshold if custom_threshold is None else check_threshold(custom_threshold)
        status_code = self.status_code if custom_status_code is None else custom_status_code
        message = self.message if custom_message is None else custom_message

        async def handler(request: RequestContext, respond: Responder, call_next: Continuation):
            token = extract_token(request)
            if not token:
                logger.warning("reCAPTCHA rejected: no token on request")
                return await _resolve(respond(status_code, {"error": message}))

            verdict = await self.evaluate(token, threshold)
            if not verdict.admitted:
                return await _resolve(respond(status_code, {"error": message}))

            setattr(request, SCORE_ATTRIBUTE, verdict.score)
            return await _resolve(call_next())

        return handler
