"""Authentication dependencies for FastAPI routes."""

from uuid import UUID

from fastapi import Request

from smartrec.services.auth_service import resolve_user_id


def bearer_token(request: Request) -> str | None:
    """The token from an ``Authorization: Bearer <token>`` header, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def resolve_caller(request: Request, explicit_user_id: UUID | None) -> UUID | None:
    """Explicit body ``userId`` wins; otherwise the verified bearer identity, else None."""
    if explicit_user_id is not None:
        return explicit_user_id
    token = bearer_token(request)
    if token is None:
        return None
    return await resolve_user_id(token)
