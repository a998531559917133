"""Abstract interfaces for image edit backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from photostudio.core.codec import Image, from_encoded


class EditRequest(BaseModel):
    """Single edit call payload: raw image bytes, media type and instruction."""

    model_config = ConfigDict(frozen=True)

    image_data: bytes
    media_type: str
    instruction: str


class EditResult(BaseModel):
    """Result payload returned by an edit call."""

    model_config = ConfigDict(frozen=True)

    encoded_image: str
    narrative_text: str | None = None

    @property
    def image(self) -> Image:
        return from_encoded(self.encoded_image)


class ImageEditClient(ABC):
    """Interface for generative image edit backends."""

    @abstractmethod
    async def submit(self, request: EditRequest) -> EditResult:
        """Send one edit request and return the model's reply."""
