"""
Structural contracts between the verifier and the host request pipeline.

The verifier does not depend on any web framework. A request only needs
readable body/headers mappings and an assignable score attribute; the host
supplies a callable that sends a JSON error and a callable that continues
processing.
"""

from collections.abc import Awaitable, Mapping
from typing import Any, Callable, Optional, Protocol, Union


class RequestContext(Protocol):
    """Anything with body and headers mappings (either may be None)."""

    body: Optional[Mapping[str, Any]]
    headers: Optional[Mapping[str, str]]


# respond(status_code, payload) sends {"error": ...} back to the client
Responder = Callable[[int, dict[str, Any]], Union[Awaitable[Any], Any]]

# call_next() hands the request to downstream processing
Continuation = Callable[[], Union[Awaitable[Any], Any]]

Handler = Callable[[RequestContext, Responder, Continuation], Awaitable[Any]]
