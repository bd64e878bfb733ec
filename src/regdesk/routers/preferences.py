"""Visitor preferences kept in the session cookie"""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from regdesk.auth.dependencies import get_theme_preference
from regdesk.auth.models import ThemePreference

router = APIRouter(prefix="/preferences", tags=["Preferences"])


class ThemePayload(BaseModel):
    theme: Literal["light", "dark"]


@router.get("/theme")
async def get_theme(preference: ThemePreference = Depends(get_theme_preference)):
    return {"theme": preference.get()}


@router.put("/theme")
async def set_theme(
    payload: ThemePayload,
    preference: ThemePreference = Depends(get_theme_preference),
):
    return {"theme": preference.set(payload.theme)}
