"""
Speech-to-text through Deepgram's pre-recorded ``/v1/listen`` API.

Audio arrives as an in-memory upload from the chat widget; the transcript
of the first channel's best alternative is returned.
"""

import logging

import requests

from mux_common.observability import inject_trace_context

from app.errors import redact

logger = logging.getLogger("speech")

MAX_AUDIO_BYTES = 10 * 1024 * 1024

LISTEN_OPTIONS = {
    "model": "nova-2",
    "language": "en-US",
    "smart_format": "true",
    "punctuate": "true",
    "paragraphs": "true",
    "utterances": "true",
}


class TranscriptionError(Exception):
    """The provider call failed or returned something unusable."""

    pass


class NoSpeechError(TranscriptionError):
    """The audio was processed but contained no recognisable speech."""

    pass


def extract_transcript(payload: dict) -> dict:
    """Pull ``{transcript, confidence, duration, words}`` from a listen response.

    Raises:
        NoSpeechError: no channels, or an empty transcript.
    """
    channels = ((payload or {}).get("results") or {}).get("channels") or []
    if not channels:
        raise NoSpeechError("No speech detected in audio")

    alternatives = channels[0].get("alternatives") or [{}]
    best = alternatives[0] or {}
    transcript = (best.get("transcript") or "").strip()
    if not transcript:
        raise NoSpeechError("No speech content detected")

    return {
        "transcript": transcript,
        "confidence": best.get("confidence") or 0,
        "duration": (payload.get("metadata") or {}).get("duration") or 0,
        "words": best.get("words") or [],
    }


class DeepgramTranscriber:
    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.deepgram.com",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def transcribe(self, audio: bytes, content_type: str | None = None) -> dict:
        """Transcribe *audio* and return the transcript result dict."""
        headers = inject_trace_context({
            "Authorization": f"Token {self.api_key}",
            "Content-Type": content_type or "audio/webm",
        })
        try:
            response = self.session.post(
                f"{self.base_url}/v1/listen",
                params=LISTEN_OPTIONS,
                data=audio,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TranscriptionError(redact(exc)) from exc

        if not response.ok:
            logger.error("Deepgram error %d: %s", response.status_code, redact(response.text))
            raise TranscriptionError(f"Deepgram returned HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise TranscriptionError("Deepgram returned a non-JSON body") from exc

        result = extract_transcript(payload)
        logger.info(
            "Transcribed %.1fs of audio (confidence=%.2f)",
            float(result["duration"]), float(result["confidence"]),
        )
        return result
