"""
Simulated-chat message schemas.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class SaveMessageRequest(BaseModel):
    sender: Literal["user", "persona", "system"]
    text: str = Field(..., min_length=1)
    insight: str | None = None
    # Client-side epoch milliseconds.
    timestamp: int = Field(..., ge=0)
