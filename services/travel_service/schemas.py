"""Request bodies for the travel HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TRAVELER_PROFILE: dict[str, Any] = {
    "interests": ["general"],
    "budget": "moderate",
    "travelStyle": "balanced",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ItineraryBody(_CamelModel):
    destination: str = ""
    traveler_profile: dict[str, Any] | None = Field(default=None, alias="travelerProfile")

    def merged_profile(self) -> dict[str, Any]:
        return {**DEFAULT_TRAVELER_PROFILE, **(self.traveler_profile or {})}


class TranslateBody(_CamelModel):
    text: str = ""
    source_lang: str = Field(default="", alias="sourceLang")
    target_lang: str = Field(default="", alias="targetLang")


class ChatBody(_CamelModel):
    session_id: str | None = Field(default=None, alias="sessionId")
    message: str = ""
