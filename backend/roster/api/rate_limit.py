"""Rate Limit Dependency: applies the app's RequestThrottle to a route group.

Invariants:
    - The throttle instance lives on app.state (built once in create_app), never a module global
    - Client key is the peer address; X-Forwarded-For is used only when trust_forwarded_for is set
    - Denial becomes HTTP 429 here; the throttle itself never raises
"""

import logging

from fastapi import HTTPException, Request, status

from roster.core.domain_types import Admission, ClientKey
from roster.core.request_throttle import RequestThrottle

logger = logging.getLogger(__name__)

TOO_MANY_REQUESTS_MESSAGE = "Too many requests. Please try again later."


def client_key(request: Request, trust_forwarded_for: bool = False) -> ClientKey:
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return ClientKey(first_hop)
    if request.client is not None and request.client.host:
        return ClientKey(request.client.host)
    return ClientKey("unknown")


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency: admit the request or answer 429."""
    throttle: RequestThrottle = request.app.state.throttle
    key = client_key(request, request.app.state.settings.trust_forwarded_for)
    if throttle.admit(key) is Admission.DENY:
        logger.warning(
            "Rate limit exceeded",
            extra={"client": key, "path": request.url.path},
        )
        raise HTTPException(
            status.HTTP_429_TOO_MANY_REQUESTS,
            detail=TOO_MANY_REQUESTS_MESSAGE,
        )
