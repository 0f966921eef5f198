import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.config import Settings
from app.dependencies import get_settings
from app.models.speech import TranscriptResponse
from app.speech import MAX_AUDIO_BYTES, DeepgramTranscriber, NoSpeechError, TranscriptionError

logger = logging.getLogger("speech-api")

router = APIRouter(prefix="/api", tags=["Speech"])


def get_transcriber(settings: Settings = Depends(get_settings)) -> Optional[DeepgramTranscriber]:
    if not settings.deepgram_api_key:
        return None
    return DeepgramTranscriber(settings.deepgram_api_key, settings.deepgram_base_url)


@router.post("/speech-to-text", response_model=TranscriptResponse)
async def speech_to_text(
    audio: Optional[UploadFile] = File(default=None),
    transcriber: Optional[DeepgramTranscriber] = Depends(get_transcriber),
):
    """Transcribe an uploaded audio clip (multipart field ``audio``, max 10MB)."""
    if audio is None:
        raise HTTPException(status_code=400, detail="No audio file provided")
    if transcriber is None:
        raise HTTPException(status_code=500, detail="Deepgram API key not configured")

    # One byte past the limit is enough to know it is too large
    data = await audio.read(MAX_AUDIO_BYTES + 1)
    if len(data) > MAX_AUDIO_BYTES:
        raise HTTPException(status_code=413, detail="Audio file exceeds the 10MB limit")
    if not data:
        raise HTTPException(status_code=400, detail="No audio file provided")

    try:
        return await asyncio.to_thread(transcriber.transcribe, data, audio.content_type)
    except NoSpeechError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except TranscriptionError as exc:
        logger.error("Speech-to-text failed: %s", exc)
        raise HTTPException(status_code=500, detail=f"Speech recognition failed: {exc}")
