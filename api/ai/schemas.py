"""
Pydantic schemas for the analysis endpoints.

Request bodies and responses use camelCase on the wire to match the web
client. Result fields come from model output, so each one has a fallback
value (or `None`) for when the model left it out.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ScreenType = Literal["CHAT", "PROFILE", "POST", "UNKNOWN"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ----------------------------------------------------------------


class ClassifyRequest(CamelModel):
    images: list[str] | None = None
    model: str | None = None


class OverviewRequest(CamelModel):
    url: str | None = ""
    screenshots: list[str] | None = None
    language: str | None = "en"
    model: str | None = None


class PostRequest(CamelModel):
    content: str | None = ""
    images: list[str] | None = None
    language: str | None = "en"
    model: str | None = None


class ChatTarget(CamelModel):
    name: str | None = None
    age: str | None = None
    gender: str | None = None
    occupation: str | None = None


class ChatUser(CamelModel):
    name: str | None = None
    occupation: str | None = None


class ChatContext(CamelModel):
    stage: str | None = None
    goal: str | None = None
    duration: str | None = None
    chat_logs: str = ""
    chat_images: list[str] = Field(default_factory=list)


class ChatLogRequest(CamelModel):
    target: ChatTarget = Field(default_factory=ChatTarget)
    user: ChatUser = Field(default_factory=ChatUser)
    context: ChatContext | None = None
    language: str | None = "en"
    model: str | None = None


class PersonalityProfile(CamelModel):
    name: str = ""
    occupation: str = ""
    bio: str = ""
    age: str = ""
    social_links: str | None = None


class PersonalityRequest(CamelModel):
    profile: PersonalityProfile | None = None
    avatar_b64: str | None = None
    additional_images: list[str] = Field(default_factory=list)
    social_analysis_history: list[dict[str, Any]] = Field(default_factory=list)
    post_analysis_history: list[dict[str, Any]] = Field(default_factory=list)
    consultation_history: list[dict[str, Any]] = Field(default_factory=list)
    avatar_analysis: str | None = None
    supplementary_info: str | None = None
    language: str | None = "en"
    model: str | None = None


class AvatarRequest(CamelModel):
    name: str | None = None
    image_b64: str | None = None
    model: str | None = None


class PersonaReplyRequest(CamelModel):
    target: dict[str, Any] | None = None
    messages: list[dict[str, Any]] | None = None
    language: str | None = "en"
    model: str | None = None


class CompressImageRequest(CamelModel):
    image: str = Field(..., min_length=1)
    max_width: int = Field(default=800, ge=16, le=4096)
    quality: float = Field(default=0.6, gt=0.0, le=1.0)
    max_size_kb: int | None = Field(default=None, ge=1, alias="maxSizeKB")


# --- Results -----------------------------------------------------------------


class ExtractedProfile(CamelModel):
    name: str = ""
    gender: Literal["Male", "Female"] = "Female"
    age: str = ""
    occupation: str = ""
    bio: str = ""


class ClassificationResult(CamelModel):
    type: ScreenType = "UNKNOWN"
    confidence: float = 0.9
    extracted_profile: ExtractedProfile = Field(default_factory=ExtractedProfile)
    # [ymin, xmin, ymax, xmax] on a 0-1000 grid; None when no avatar was found.
    avatar_box: list[int] | None = None
    avatar_source_index: int = 0
    analysis_summary: str = ""


class ProfileOverview(CamelModel):
    id: str
    url: str
    platform: str = "Unknown"
    handle: str = "Unknown"
    timeframe: str = "Unknown"
    report_tags: list[str] = Field(default_factory=list)
    surface_subtext: str = "Analysis pending..."
    target_audience: str = "Analysis pending..."
    persona_impression: str = "Analysis pending..."
    performance_purpose: str = "Analysis pending..."
    suggested_replies: list[str] = Field(default_factory=list)
    report: str = "{}"
    timestamp: int


class PostAnalysis(CamelModel):
    analysis: str = "Analysis failed."
    suggested_replies: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)


class DateIdea(CamelModel):
    title: str = ""
    description: str = ""


class ChatLogAnalysis(CamelModel):
    compatibility_score: float = 0
    status_assessment: str = "Analysis complete."
    partner_personality_analysis: str | None = None
    green_flags: list[str] = Field(default_factory=list)
    red_flags: list[str] = Field(default_factory=list)
    communication_dos: list[str] = Field(default_factory=list)
    communication_donts: list[str] = Field(default_factory=list)
    magic_topics: list[str] = Field(default_factory=list)
    strategy: str = ""
    date_ideas: list[DateIdea] = Field(default_factory=list)
    ice_breakers: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    generated_at: int
    goal_context: str | None = None


class BigFive(CamelModel):
    openness: float = 50
    conscientiousness: float = 50
    extraversion: float = 50
    agreeableness: float = 50
    neuroticism: float = 50


class PersonalityReport(CamelModel):
    big_five: BigFive = Field(default_factory=BigFive)
    mbti: str = "Unknown"
    emotional_stability: float = 50
    core_interests: list[str] = Field(default_factory=list)
    communication_style: str = "Average"
    summary: str = "No summary generated."
    dating_advice: str = "No specific advice generated."
    avatar_analysis: str | None = None
    data_sufficiency: float = 0
    generated_at: int
    tags: list[str] = Field(default_factory=list)


class AvatarAnalysis(CamelModel):
    analysis: str


class PersonaReply(CamelModel):
    reply: str | None = None
    insight: str | None = None


class CompressedImage(CamelModel):
    image: str
