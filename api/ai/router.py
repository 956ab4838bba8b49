"""
Analysis API endpoints (v2).

`smart-classify` is open to guests; everything else requires a bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import authenticate
from core.errors import AppError

from . import images, schemas, service

router = APIRouter(prefix="/api/ai/v2")


def _bad_request(message: str) -> AppError:
    return AppError(message, status.HTTP_400_BAD_REQUEST)


@router.post("/smart-classify")
async def smart_classify(request: schemas.ClassifyRequest) -> dict:
    if not request.images:
        raise _bad_request("Images array is required")
    result = await service.classify_and_extract(request.images, request.model)
    return result.model_dump(by_alias=True)


@router.post("/analyze-overview")
async def analyze_overview(
    request: schemas.OverviewRequest,
    _: str = Depends(authenticate),
) -> dict:
    if not request.screenshots:
        raise _bad_request("Screenshots array is required")
    result = await service.analyze_profile_overview(
        request.url or "",
        request.screenshots,
        request.language or "en",
        request.model,
    )
    return result.model_dump(by_alias=True)


@router.post("/analyze-post")
async def analyze_post(
    request: schemas.PostRequest,
    _: str = Depends(authenticate),
) -> dict:
    if not request.images:
        raise _bad_request("Images array is required")
    result = await service.analyze_post(
        request.content or "",
        request.images,
        request.language or "en",
        request.model,
    )
    return result.model_dump(by_alias=True)


@router.post("/analyze-chat-log")
async def analyze_chat_log(
    request: schemas.ChatLogRequest,
    _: str = Depends(authenticate),
) -> dict:
    if request.context is None or not request.context.chat_logs:
        raise _bad_request("Chat logs are required")
    result = await service.analyze_chat_log(
        request.target,
        request.user,
        request.context,
        request.language or "en",
        request.model,
    )
    return result.model_dump(by_alias=True)


@router.post("/analyze-personality-v2")
async def analyze_personality(
    request: schemas.PersonalityRequest,
    _: str = Depends(authenticate),
) -> dict:
    if request.profile is None or not request.profile.name:
        raise _bad_request("Profile with name is required")
    result = await service.analyze_personality(
        request.profile,
        request.avatar_b64,
        request.additional_images,
        request.social_analysis_history,
        request.post_analysis_history,
        request.consultation_history,
        request.avatar_analysis,
        request.supplementary_info,
        request.language or "en",
        request.model,
    )
    return result.model_dump(by_alias=True)


@router.post("/analyze-avatar")
async def analyze_avatar(
    request: schemas.AvatarRequest,
    _: str = Depends(authenticate),
) -> dict:
    if not request.image_b64:
        raise _bad_request("Image is required")
    result = await service.analyze_avatar(request.name or "Unknown", request.image_b64, request.model)
    return result.model_dump(by_alias=True)


@router.post("/persona-reply")
async def persona_reply(
    request: schemas.PersonaReplyRequest,
    _: str = Depends(authenticate),
) -> dict:
    if request.target is None or request.messages is None:
        raise _bad_request("Target and messages are required")
    result = await service.generate_persona_reply(
        request.target,
        request.messages,
        request.language or "en",
        request.model,
    )
    return result.model_dump(by_alias=True)


@router.post("/compress-image")
async def compress_image(
    request: schemas.CompressImageRequest,
    _: str = Depends(authenticate),
) -> dict:
    image = await images.compress_image(
        request.image,
        max_width=request.max_width,
        quality=request.quality,
        max_size_kb=request.max_size_kb,
    )
    return schemas.CompressedImage(image=image).model_dump(by_alias=True)
