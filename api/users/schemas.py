"""
User profile schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ProfileUpdateRequest(BaseModel):
    """
    Partial update: omitted fields keep their stored value.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, max_length=200)
    occupation: str | None = Field(default=None, max_length=200)
    bio: str | None = None
    age: str | None = Field(default=None, max_length=20)
    avatar_b64: str | None = Field(default=None, alias="avatarB64")
    additional_images: list[str] | None = Field(default=None, alias="additionalImages")
    social_links: str | None = Field(default=None, alias="socialLinks")
    ai_model_preference: str | None = Field(default=None, alias="aiModelPreference", max_length=100)
    analysis_model_preference: str | None = Field(default=None, alias="analysisModelPreference", max_length=100)
    api_endpoint: str | None = Field(default=None, alias="apiEndpoint")


class Profile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    occupation: str = ""
    bio: str = ""
    age: str = ""
    avatar_b64: str = Field(default="", alias="avatarB64")
    additional_images: list[str] = Field(default_factory=list, alias="additionalImages")
    social_links: str = Field(default="", alias="socialLinks")
    ai_model_preference: str | None = Field(default=None, alias="aiModelPreference")
    analysis_model_preference: str | None = Field(default=None, alias="analysisModelPreference")
    api_endpoint: str | None = Field(default=None, alias="apiEndpoint")


class UserProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    is_guest: bool = Field(alias="isGuest")
    profile: Profile
