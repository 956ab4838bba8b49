"""
Server-side image helpers (Pillow).

Images travel as data URIs (`data:image/png;base64,...`). Compression
re-encodes them as JPEG so model requests stay small.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import re

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r"^data:([^;]+);base64,")


def _decode(data_uri: str) -> bytes:
    match = _DATA_URI_RE.match(data_uri)
    payload = data_uri[match.end():] if match else data_uri
    return base64.b64decode(payload, validate=False)


def _encode_jpeg(image: Image.Image, quality: float) -> bytes:
    buf = io.BytesIO()
    image.save(buf, format="JPEG", quality=max(1, min(95, int(round(quality * 100)))), optimize=True)
    return buf.getvalue()


def compress_image_sync(
    data_uri: str,
    max_width: int = 800,
    quality: float = 0.6,
    max_size_kb: int | None = None,
) -> str:
    """
    Downscale to `max_width` and re-encode as JPEG.

    With `max_size_kb`, quality is lowered in 0.1 steps (not below 0.1)
    until the encoded size fits. Undecodable input is returned unchanged.
    """
    try:
        raw = _decode(data_uri)
        with Image.open(io.BytesIO(raw)) as src:
            image = src.convert("RGB")
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as exc:
        logger.warning("Image compression failed, using original: %s", exc)
        return data_uri

    width, height = image.size
    if width > max_width:
        height = max(1, round(height * max_width / width))
        width = max_width
        image = image.resize((width, height), Image.Resampling.LANCZOS)

    current = quality
    encoded = _encode_jpeg(image, current)
    if max_size_kb:
        while len(encoded) > max_size_kb * 1024 and current > 0.1 + 1e-9:
            current = round(current - 0.1, 2)
            encoded = _encode_jpeg(image, current)

    return "data:image/jpeg;base64," + base64.b64encode(encoded).decode("ascii")


async def compress_image(
    data_uri: str,
    max_width: int = 800,
    quality: float = 0.6,
    max_size_kb: int | None = None,
) -> str:
    # Pillow work is CPU-bound; keep it off the event loop.
    return await asyncio.to_thread(compress_image_sync, data_uri, max_width, quality, max_size_kb)
