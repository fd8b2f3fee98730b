"""Bearer token verification against the external auth service."""

import logging
from uuid import UUID

import httpx

from smartrec.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

AUTH_TIMEOUT = 10.0


async def resolve_user_id(token: str) -> UUID | None:
    """Return the user id the token belongs to, or None if it cannot be verified."""
    if not token:
        return None

    headers = {"Authorization": f"Bearer {token}"}
    if settings.auth_api_key:
        headers["apikey"] = settings.auth_api_key

    try:
        async with httpx.AsyncClient(timeout=AUTH_TIMEOUT) as client:
            response = await client.get(f"{settings.auth_url.rstrip('/')}/user", headers=headers)
            response.raise_for_status()
            return UUID(str(response.json()["id"]))
    except (httpx.HTTPError, httpx.InvalidURL, ValueError, KeyError, TypeError) as e:
        logger.info("Token verification failed: %s", e)
        return None
