"""
Target profile schemas.

A target is a person the user is analysing. Saved analyses reuse the result
records of the analysis endpoints, so the client can post back exactly what
it received.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from ai import schemas as ai_schemas
from ai.schemas import CamelModel


class TargetCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    gender: str = Field(default="", max_length=20)
    occupation: str = Field(default="", max_length=200)
    bio: str = ""
    age: str = Field(default="", max_length=20)
    avatar_b64: str = ""
    additional_images: list[str] = Field(default_factory=list)
    social_links: str = ""
    avatar_analysis: str = ""
    general_summary: str = ""


class TargetUpdateRequest(CamelModel):
    """
    Partial update: omitted (or null) fields keep their stored value.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    gender: str | None = Field(default=None, max_length=20)
    occupation: str | None = Field(default=None, max_length=200)
    bio: str | None = None
    age: str | None = Field(default=None, max_length=20)
    avatar_b64: str | None = None
    additional_images: list[str] | None = None
    social_links: str | None = None
    avatar_analysis: str | None = None
    general_summary: str | None = None


class Target(CamelModel):
    id: int
    name: str
    gender: str = ""
    occupation: str = ""
    bio: str = ""
    age: str = ""
    avatar_b64: str = ""
    additional_images: list[str] = Field(default_factory=list)
    social_links: str = ""
    avatar_analysis: str = ""
    general_summary: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Saved analyses ----------------------------------------------------------
# `id` is assigned by the database and ignored on input.


class SavedPersonalityReport(ai_schemas.PersonalityReport):
    id: str | None = None


class SavedSocialAnalysis(ai_schemas.ProfileOverview):
    id: str | None = None


class SavedPostAnalysis(ai_schemas.PostAnalysis):
    id: str | None = None
    content: str = ""
    images: list[str] = Field(default_factory=list)
    timestamp: int


class SavedRelationshipReport(ai_schemas.ChatLogAnalysis):
    id: str | None = None


class TargetDetail(Target):
    personality_report: SavedPersonalityReport | None = None
    social_analysis_history: list[SavedSocialAnalysis] = Field(default_factory=list)
    post_analysis_history: list[SavedPostAnalysis] = Field(default_factory=list)
    consultation_history: list[SavedRelationshipReport] = Field(default_factory=list)
