"""
Analysis orchestration.

Flow for every operation:
1) Build a prompt from the structured inputs
2) Call the AI gateway (JSON mode unless the answer is free text)
3) Parse the reply with `parse_json` (never raises)
4) Coerce each field into the typed record, falling back to defaults

Model output is untrusted: a field of the wrong type is treated as missing.
"""

from __future__ import annotations

import json
import math
import time
from typing import Any

from core import ai_client, settings

from . import prompts, schemas


def _now_ms() -> int:
    return int(time.time() * 1000)


def _text(value: Any, default: str | None = "") -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return default


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass; a boolean score is not a score.
    # json.loads accepts NaN and Infinity.
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _number(value: Any, default: float) -> float:
    if _is_finite_number(value) and value:
        return value
    return default


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _avatar_box(value: Any) -> list[int] | None:
    if not isinstance(value, list) or len(value) != 4:
        return None
    if not all(_is_finite_number(v) for v in value):
        return None
    return [int(v) for v in value]


async def _ask(
    prompt: str,
    *,
    model: str,
    images: list[str] | None = None,
    response_format: ai_client.ResponseFormat = "json",
) -> str:
    response = await ai_client.call_ai(
        ai_client.AIRequest(
            model=model,
            prompt=prompt,
            images=list(images or []),
            response_format=response_format,
        )
    )
    return response.text


async def classify_and_extract(images: list[str], model: str | None = None) -> schemas.ClassificationResult:
    text = await _ask(prompts.classify_prompt(), model=model or settings.ai_default_model(), images=images)
    data = ai_client.parse_json(text)

    screen_type = data.get("type")
    if screen_type not in ("CHAT", "PROFILE", "POST", "UNKNOWN"):
        screen_type = "UNKNOWN"

    raw_profile = data.get("extractedProfile")
    raw_profile = raw_profile if isinstance(raw_profile, dict) else {}
    gender = raw_profile.get("gender")
    profile = schemas.ExtractedProfile(
        name=_text(raw_profile.get("name")),
        gender=gender if gender in ("Male", "Female") else "Female",
        age=_text(raw_profile.get("age")),
        occupation=_text(raw_profile.get("occupation")),
        bio=_text(raw_profile.get("bio")),
    )

    source_index = data.get("avatarSourceIndex")
    if not isinstance(source_index, int) or isinstance(source_index, bool) or source_index < 0:
        source_index = 0

    return schemas.ClassificationResult(
        type=screen_type,
        confidence=0.9,
        extracted_profile=profile,
        avatar_box=_avatar_box(data.get("avatarBox")),
        avatar_source_index=source_index,
        analysis_summary=f"Detected {data.get('type') or 'Content'}",
    )


async def analyze_profile_overview(
    url: str,
    screenshots: list[str],
    language: str = "en",
    model: str | None = None,
) -> schemas.ProfileOverview:
    text = await _ask(
        prompts.profile_overview_prompt(url, language),
        model=model or settings.ai_default_model(),
        images=screenshots[:3],
    )
    data = ai_client.parse_json(text)
    now = _now_ms()
    pending = "Analysis pending..."

    return schemas.ProfileOverview(
        id=str(now),
        url=url,
        platform=_text(data.get("platform"), "Unknown"),
        handle=_text(data.get("handle"), "Unknown"),
        timeframe=_text(data.get("timeframe"), "Unknown"),
        report_tags=_str_list(data.get("reportTags")),
        surface_subtext=_text(data.get("surfaceSubtext"), pending),
        target_audience=_text(data.get("targetAudience"), pending),
        persona_impression=_text(data.get("personaImpression"), pending),
        performance_purpose=_text(data.get("performancePurpose"), pending),
        suggested_replies=_str_list(data.get("suggestedReplies")),
        report=json.dumps(data, indent=2, ensure_ascii=False),
        timestamp=now,
    )


async def analyze_post(
    content: str,
    images: list[str],
    language: str = "en",
    model: str | None = None,
) -> schemas.PostAnalysis:
    text = await _ask(
        prompts.post_prompt(content, language),
        model=model or settings.ai_default_model(),
        images=images[:2],
    )
    data = ai_client.parse_json(text)
    return schemas.PostAnalysis(
        analysis=_text(data.get("analysis"), "Analysis failed."),
        suggested_replies=_str_list(data.get("suggestedReplies")),
        tags=_str_list(data.get("tags")),
    )


def _date_ideas(value: Any) -> list[schemas.DateIdea]:
    if not isinstance(value, list):
        return []
    ideas = []
    for item in value:
        if isinstance(item, dict):
            ideas.append(
                schemas.DateIdea(title=_text(item.get("title")), description=_text(item.get("description")))
            )
        elif isinstance(item, str) and item.strip():
            ideas.append(schemas.DateIdea(title=item))
    return ideas


async def analyze_chat_log(
    target: schemas.ChatTarget,
    user: schemas.ChatUser,
    context: schemas.ChatContext,
    language: str = "en",
    model: str | None = None,
) -> schemas.ChatLogAnalysis:
    text = await _ask(
        prompts.chat_log_prompt(target, user, context, language),
        model=model or settings.ai_default_model(),
        images=context.chat_images[:3],
    )
    data = ai_client.parse_json(text)
    return schemas.ChatLogAnalysis(
        compatibility_score=_number(data.get("compatibilityScore"), 0),
        status_assessment=_text(data.get("statusAssessment"), "Analysis complete."),
        partner_personality_analysis=_text(data.get("partnerPersonalityAnalysis"), None),
        green_flags=_str_list(data.get("greenFlags")),
        red_flags=_str_list(data.get("redFlags")),
        communication_dos=_str_list(data.get("communicationDos")),
        communication_donts=_str_list(data.get("communicationDonts")),
        magic_topics=_str_list(data.get("magicTopics")),
        strategy=_text(data.get("strategy")),
        date_ideas=_date_ideas(data.get("dateIdeas")),
        ice_breakers=[],
        tags=_str_list(data.get("tags")),
        generated_at=_now_ms(),
        goal_context=context.goal,
    )


def _big_five(value: Any) -> schemas.BigFive:
    if not isinstance(value, dict):
        return schemas.BigFive()
    defaults = schemas.BigFive()
    return schemas.BigFive(
        **{trait: _number(value.get(trait), getattr(defaults, trait)) for trait in schemas.BigFive.model_fields}
    )


async def analyze_personality(
    profile: schemas.PersonalityProfile,
    avatar_b64: str | None,
    additional_images: list[str],
    social_history: list[dict[str, Any]],
    post_history: list[dict[str, Any]],
    consultation_history: list[dict[str, Any]],
    avatar_analysis: str | None = None,
    supplementary_info: str | None = None,
    language: str = "en",
    model: str | None = None,
) -> schemas.PersonalityReport:
    deep_context = prompts.intelligence_context(social_history, post_history, consultation_history)
    prompt = prompts.personality_prompt(
        profile,
        deep_context=deep_context,
        avatar_analysis=avatar_analysis,
        supplementary_info=supplementary_info,
        language=language,
    )

    images: list[str] = []
    if avatar_b64:
        images.append(avatar_b64)
    images.extend(additional_images[:5])

    text = await _ask(prompt, model=model or settings.ai_default_model(), images=images)
    data = ai_client.parse_json(text)

    return schemas.PersonalityReport(
        big_five=_big_five(data.get("bigFive")),
        mbti=_text(data.get("mbti"), "Unknown"),
        emotional_stability=_number(data.get("emotionalStability"), 50),
        core_interests=_str_list(data.get("coreInterests")),
        communication_style=_text(data.get("communicationStyle"), "Average"),
        summary=_text(data.get("summary"), "No summary generated."),
        dating_advice=_text(data.get("datingAdvice"), "No specific advice generated."),
        avatar_analysis=_text(data.get("avatarAnalysis"), avatar_analysis),
        data_sufficiency=_number(data.get("dataSufficiency"), 0),
        generated_at=_now_ms(),
        tags=_str_list(data.get("tags")),
    )


async def analyze_avatar(name: str, image_b64: str, model: str | None = None) -> schemas.AvatarAnalysis:
    text = await _ask(
        prompts.avatar_prompt(name),
        model=model or settings.ai_fast_model(),
        images=[image_b64],
        response_format="text",
    )
    return schemas.AvatarAnalysis(analysis=text)


async def generate_persona_reply(
    target: dict[str, Any],
    messages: list[dict[str, Any]],
    language: str = "en",
    model: str | None = None,
) -> schemas.PersonaReply:
    text = await _ask(
        prompts.persona_reply_prompt(target, messages, language),
        model=model or settings.ai_fast_model(),
    )
    data = ai_client.parse_json(text)
    return schemas.PersonaReply(
        reply=_text(data.get("reply"), None),
        insight=_text(data.get("insight"), None),
    )
