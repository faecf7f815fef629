"""
HTTP client helpers for the siteverify call.
"""

import httpx

DEFAULT_HEADERS = {
    "User-Agent": "recaptcha-v3-guard/1.0",
    "Accept": "application/json",
}


def create_async_client(**kwargs) -> httpx.AsyncClient:
    """
    Create an AsyncClient for siteverify requests.

    No timeout is passed so httpx's own default applies. Keyword arguments
    (e.g. transport=) are forwarded to httpx.AsyncClient.
    """
    headers = {**DEFAULT_HEADERS, **kwargs.pop("headers", {})}
    return httpx.AsyncClient(headers=headers, follow_redirects=True, **kwargs)
