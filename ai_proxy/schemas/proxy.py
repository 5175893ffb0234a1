"""Request envelope accepted by the AI proxy."""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

MAX_PAYLOAD_LENGTH = 2000
MAX_IMAGES = 3


class Intent(str, Enum):
    """What the caller wants the model to do."""

    NLU = "nlu"
    VISION = "vision"
    SPEECH = "speech"
    # Older app builds still send log_food for text logging
    LOG_FOOD = "log_food"

    @property
    def normalized(self) -> "Intent":
        return Intent.NLU if self is Intent.LOG_FOOD else self


Payload = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_PAYLOAD_LENGTH),
]
Base64Blob = Annotated[str, StringConstraints(min_length=1)]


class ProxyRequest(BaseModel):
    """Body of POST /ai-proxy."""

    intent: Intent
    payload: Payload
    image: str | None = None
    images: Annotated[list[Base64Blob], Field(min_length=1, max_length=MAX_IMAGES)] | None = None
    audio: str | None = None
    audio_mime_type: str | None = Field(default=None, alias="audioMimeType")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def normalized_intent(self) -> Intent:
        return self.intent.normalized
