from typing import Any

from pydantic import BaseModel


class TranscriptResponse(BaseModel):
    transcript: str
    confidence: float
    duration: float
    words: list[dict[str, Any]]
