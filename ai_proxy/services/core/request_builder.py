"""
Turn a validated proxy request into a Gemini generateContent body.

Routing is split from body construction: route_request() checks the
modality requirements and picks one of three call shapes, and
build_upstream_request() is a pure function of that shape. Nothing here
touches the network.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ai_proxy.schemas.proxy import Intent, ProxyRequest
from ai_proxy.services.prompts import (
    DEFAULT_SPEECH_PROMPT,
    DEFAULT_VISION_PROMPT,
    NLU_EXTRACTION_PROMPT,
)

IMAGE_MIME_TYPE = "image/jpeg"
DEFAULT_AUDIO_MIME_TYPE = "audio/m4a"


class MissingMediaError(ValueError):
    """A vision or speech request arrived without its media."""


@dataclass(frozen=True)
class GenerationProfile:
    temperature: float
    max_output_tokens: int = 512


# Extraction and transcription want deterministic output
GENERATION_PROFILES: dict[Intent, GenerationProfile] = {
    Intent.NLU: GenerationProfile(temperature=0.3),
    Intent.VISION: GenerationProfile(temperature=0.4),
    Intent.SPEECH: GenerationProfile(temperature=0.1),
}


@dataclass(frozen=True)
class NluCall:
    payload: str
    intent: Intent = field(default=Intent.NLU, init=False)


@dataclass(frozen=True)
class VisionCall:
    instruction: str
    images: tuple[str, ...]
    intent: Intent = field(default=Intent.VISION, init=False)


@dataclass(frozen=True)
class SpeechCall:
    instruction: str
    audio: str
    mime_type: str
    intent: Intent = field(default=Intent.SPEECH, init=False)


UpstreamCall = Union[NluCall, VisionCall, SpeechCall]


def route_request(request: ProxyRequest) -> UpstreamCall:
    """
    Pick the call shape for a request.

    Raises:
        MissingMediaError: vision without any image, speech without audio
    """
    intent = request.normalized_intent

    if intent is Intent.VISION:
        if request.images:
            images = tuple(request.images)
        elif request.image:
            images = (request.image,)
        else:
            raise MissingMediaError("Missing image data for vision request.")
        return VisionCall(instruction=request.payload or DEFAULT_VISION_PROMPT, images=images)

    if intent is Intent.SPEECH:
        if not request.audio:
            raise MissingMediaError("Missing audio data for speech request.")
        return SpeechCall(
            instruction=request.payload or DEFAULT_SPEECH_PROMPT,
            audio=request.audio,
            mime_type=request.audio_mime_type or DEFAULT_AUDIO_MIME_TYPE,
        )

    return NluCall(payload=request.payload)


def _inline_data(mime_type: str, data: str) -> dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def build_upstream_request(call: UpstreamCall) -> dict[str, Any]:
    """Build the generateContent request body for a routed call."""
    if isinstance(call, VisionCall):
        parts = [{"text": call.instruction}]
        parts.extend(_inline_data(IMAGE_MIME_TYPE, image) for image in call.images)
    elif isinstance(call, SpeechCall):
        parts = [{"text": call.instruction}, _inline_data(call.mime_type, call.audio)]
    else:
        parts = [{"text": NLU_EXTRACTION_PROMPT.format(payload=call.payload)}]

    profile = GENERATION_PROFILES[call.intent]
    return {
        "contents": [{"parts": parts}],
        "generationConfig": {
            "temperature": profile.temperature,
            "maxOutputTokens": profile.max_output_tokens,
        },
    }
