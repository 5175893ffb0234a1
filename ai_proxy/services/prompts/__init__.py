from .ai_proxy import (
    DEFAULT_SPEECH_PROMPT,
    DEFAULT_VISION_PROMPT,
    NLU_EXTRACTION_PROMPT,
    SUPPORTED_NLU_INTENTS,
)

__all__ = [
    "DEFAULT_SPEECH_PROMPT",
    "DEFAULT_VISION_PROMPT",
    "NLU_EXTRACTION_PROMPT",
    "SUPPORTED_NLU_INTENTS",
]
