"""Smart recommendation endpoint — one POST, dispatched on the body's ``action``."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from smartrec.config import get_settings
from smartrec.dependencies.auth import resolve_caller
from smartrec.exceptions import InvalidRequestError, NotAuthenticatedError
from smartrec.models.base import get_db
from smartrec.schemas.engine import ACTIONS, EngineRequest
from smartrec.services import match_explainer, profile_service, recommendation_service, signal_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


@router.post("")
async def dispatch(
    request: Request,
    body: EngineRequest,
    db: AsyncSession = Depends(get_db),
):
    """Route the request to the handler named by ``action``."""
    if body.action not in ACTIONS:
        raise InvalidRequestError("Invalid action")

    handler = _HANDLERS[body.action]
    return await handler(request, body, db)


async def _get_recommendations(request: Request, body: EngineRequest, db: AsyncSession):
    user_id = await resolve_caller(request, body.user_id)
    limit = body.limit or settings.default_recommendation_limit
    return await recommendation_service.get_recommendations(db, user_id, limit)


async def _get_user_profile(request: Request, body: EngineRequest, db: AsyncSession):
    user_id = await resolve_caller(request, body.user_id)
    if user_id is None:
        return {"profile": None, "activitySummary": None}

    profile = await profile_service.build_profile(db, user_id)
    summary = await profile_service.get_activity_summary(db, user_id)
    return {"profile": profile.to_dict(), "activitySummary": summary}


async def _record_signal(request: Request, body: EngineRequest, db: AsyncSession):
    user_id = await resolve_caller(request, body.user_id)
    if user_id is None or body.property_id is None:
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Missing userId or propertyId"},
        )

    signal_data = body.signal_data.model_dump() if body.signal_data else {}
    await signal_service.record_signal(db, user_id, body.property_id, body.signal_type or "view", signal_data)
    return {"success": True}


async def _update_preferences(request: Request, body: EngineRequest, db: AsyncSession):
    user_id = await resolve_caller(request, body.user_id)
    if user_id is None:
        raise NotAuthenticatedError()

    await signal_service.update_preferences(db, user_id, body.preference_values())
    return {"success": True}


async def _get_match_report(request: Request, body: EngineRequest, db: AsyncSession):
    user_id = await resolve_caller(request, body.user_id)
    if user_id is None or body.property_id is None:
        raise InvalidRequestError("Missing userId or propertyId")

    return await match_explainer.get_match_report(db, user_id, body.property_id)


async def _provide_feedback(request: Request, body: EngineRequest, db: AsyncSession):
    if body.recommendation_id is not None and body.feedback is not None:
        await signal_service.provide_feedback(db, body.recommendation_id, body.feedback)
    return {"success": True}


_HANDLERS = {
    "get_recommendations": _get_recommendations,
    "get_user_profile": _get_user_profile,
    "record_signal": _record_signal,
    "update_preferences": _update_preferences,
    "get_match_report": _get_match_report,
    "provide_feedback": _provide_feedback,
}
