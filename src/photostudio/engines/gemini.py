"""Gemini image edit client built on the google-genai SDK."""

from __future__ import annotations

import asyncio
import base64
from enum import Enum
import logging
import os
from typing import Any

from google import genai
from google.genai import types
from google.genai.errors import APIError
import httpx

from photostudio.core.codec import DEFAULT_MEDIA_TYPE, Image, to_encoded
from photostudio.core.errors import (
    EmptyResponseError,
    InvalidRequestError,
    RemoteServiceError,
)
from photostudio.core.interfaces import EditRequest, EditResult, ImageEditClient
from photostudio.core.provider_errors import describe_provider_error, extract_status_code

logger = logging.getLogger(__name__)

_MODEL_MAP = {
    "flash": "gemini-2.5-flash-image",
    "pro": "gemini-3-pro-image-preview",
}
_API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY")
DEFAULT_TIMEOUT_SECONDS = 120.0


class GeminiModel(str, Enum):
    """Supported Gemini image model selectors."""

    FLASH = "flash"
    PRO = "pro"

    @property
    def api_model(self) -> str:
        return _MODEL_MAP[self.value]


class GeminiEditClient(ImageEditClient):
    """ImageEditClient backed by Gemini image models."""

    def __init__(
        self,
        *,
        model: GeminiModel = GeminiModel.FLASH,
        api_key: str | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.model = model
        self._api_model = model.api_model
        self._timeout_seconds = timeout_seconds
        self._client = genai.Client(
            api_key=_resolve_api_key(api_key),
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    async def submit(self, request: EditRequest) -> EditResult:
        _validate_request(request)
        contents: list[Any] = [
            types.Part.from_bytes(data=request.image_data, mime_type=request.media_type),
            request.instruction,
        ]
        logger.debug(
            "Submitting edit to %s (%d bytes, %s).",
            self._api_model,
            len(request.image_data),
            request.media_type,
        )
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self._api_model,
                    contents=contents,
                    config=types.GenerateContentConfig(
                        response_modalities=["IMAGE", "TEXT"],
                    ),
                ),
                timeout=self._timeout_seconds,
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise RemoteServiceError(describe_provider_error(exc)) from exc
        except (APIError, httpx.HTTPError) as exc:
            raise RemoteServiceError(
                describe_provider_error(exc),
                status_code=extract_status_code(exc),
            ) from exc
        except ValueError as exc:
            # JSONDecodeError, UnknownApiResponseError and pydantic ValidationError.
            raise RemoteServiceError("The model returned a malformed reply.") from exc

        return _to_edit_result(response)


def _validate_request(request: EditRequest) -> None:
    if not request.image_data:
        raise InvalidRequestError("Edit request has no image data.")
    if not request.instruction:
        raise InvalidRequestError("Edit request has no instruction.")


def _resolve_api_key(api_key: str | None) -> str:
    resolved_key = api_key
    for env_var in _API_KEY_ENV_VARS:
        resolved_key = resolved_key or os.getenv(env_var)
    if resolved_key:
        return resolved_key
    raise ValueError(
        "Missing Gemini API key. Run `photostudio setup` or define GEMINI_API_KEY."
    )


def _to_edit_result(response: Any) -> EditResult:
    block_reason = _block_reason(response)
    if block_reason:
        raise RemoteServiceError(f"The request was blocked by the model ({block_reason}).")

    text_parts: list[str] = []
    image: Image | None = None
    try:
        for part in _response_parts(response):
            if getattr(part, "thought", False):
                continue
            text = getattr(part, "text", None)
            if text:
                text_parts.append(text)

            inline_data = getattr(part, "inline_data", None)
            if inline_data is not None and image is None:
                image = Image(
                    data=_inline_data_bytes(inline_data),
                    media_type=getattr(inline_data, "mime_type", None) or DEFAULT_MEDIA_TYPE,
                )
    except (TypeError, ValueError) as exc:
        raise RemoteServiceError("The model returned a malformed reply.") from exc

    narrative_text = "\n".join(text_parts) or None
    if image is None or not image.data:
        if narrative_text:
            raise EmptyResponseError(
                f"The model did not return an image. Model response: {narrative_text}"
            )
        raise EmptyResponseError("The model returned an empty response.")

    return EditResult(encoded_image=to_encoded(image), narrative_text=narrative_text)


def _block_reason(response: Any) -> str | None:
    feedback = getattr(response, "prompt_feedback", None)
    reason = getattr(feedback, "block_reason", None)
    if not reason:
        return None
    return str(getattr(reason, "value", reason))


def _response_parts(response: Any) -> list[Any]:
    direct_parts = getattr(response, "parts", None)
    if direct_parts is not None:
        return list(direct_parts)

    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    return list(parts)


def _inline_data_bytes(inline_data: Any) -> bytes:
    data = getattr(inline_data, "data", b"")
    if isinstance(data, bytes):
        return data
    if isinstance(data, str):
        return base64.b64decode(data)
    raise TypeError("Unsupported inline image payload type.")
