"""Match explainer — single-property match report with an optional written rationale."""

import json
import logging
from uuid import UUID

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartrec.config import get_settings
from smartrec.exceptions import PropertyNotFoundError
from smartrec.models.property import Property
from smartrec.services.profile import UserProfile
from smartrec.services.profile_service import build_profile
from smartrec.services.property_scorer import MatchResult, score_property

logger = logging.getLogger(__name__)
settings = get_settings()

SYSTEM_PROMPT = (
    "You are a real estate advisor. Explain why a property matches (or doesn't match) "
    "a user's preferences in a friendly, concise way. Be specific and helpful."
)


def match_quality(overall_score: int) -> str:
    if overall_score > 70:
        return "good"
    if overall_score > 50:
        return "moderate"
    return "weak"


def build_messages(prop: Property, profile: UserProfile, match: MatchResult) -> list[dict]:
    """Chat-completion messages asking for a 2-3 sentence rationale."""
    user_prompt = (
        f"Property: {json.dumps(prop.to_dict(), default=str)}\n"
        f"User preferences: {json.dumps(profile.to_dict()['explicit'])}\n"
        f"Match reasons: {json.dumps([r.to_dict() for r in match.match_reasons])}\n"
        f"Overall score: {match.overall_score}%\n\n"
        f"Provide a 2-3 sentence explanation of why this property is a "
        f"{match_quality(match.overall_score)} match."
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


async def generate_explanation(messages: list[dict]) -> str:
    """Best-effort rationale. Any failure yields an empty string."""
    if not settings.text_generation_api_key:
        return ""

    try:
        async with httpx.AsyncClient(timeout=settings.text_generation_timeout) as client:
            response = await client.post(
                settings.text_generation_url,
                headers={
                    "Authorization": f"Bearer {settings.text_generation_api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": settings.text_generation_model,
                    "messages": messages,
                    "max_tokens": settings.text_generation_max_tokens,
                    "temperature": settings.text_generation_temperature,
                },
            )
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        logger.warning("Match explanation request failed: %s", e)
        return ""

    try:
        return data["choices"][0]["message"]["content"] or ""
    except (KeyError, IndexError, TypeError):
        logger.warning("Unexpected match explanation payload: %s", str(data)[:200])
        return ""


async def get_match_report(db: AsyncSession, user_id: UUID, property_id: UUID) -> dict:
    """Re-score one property for the user and attach an optional rationale."""
    profile = await build_profile(db, user_id)

    prop = (await db.execute(select(Property).where(Property.id == property_id))).scalar_one_or_none()
    if prop is None:
        raise PropertyNotFoundError(f"Property not found: {property_id}")

    match = score_property(prop, profile)
    explanation = await generate_explanation(build_messages(prop, profile, match))

    return {
        "property": prop.to_dict(),
        "matchResult": match.to_dict(),
        "userProfile": profile.to_dict(),
        "aiExplanation": explanation,
    }
