"""Pydantic schemas package."""

from smartrec.schemas.engine import (
    ACTIONS,
    EngineRequest,
    PreferencesUpdate,
    SignalData,
)

__all__ = [
    "ACTIONS",
    "EngineRequest",
    "PreferencesUpdate",
    "SignalData",
]
