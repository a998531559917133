"""Conversions between uploaded files, images and data-URL encodings."""

from __future__ import annotations

import base64
import binascii
from io import BytesIO
import logging
import mimetypes
from pathlib import Path
import re

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from pydantic import BaseModel, ConfigDict

from photostudio.core.errors import MalformedEncodingError, UnsupportedInputError

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "image/png"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
_MEDIA_TYPE_PATTERN = re.compile(r"^image/[a-z0-9.+-]+$")
_DATA_URL_HEADER_PATTERN = re.compile(r"^data:([^;,]+)")


class Image(BaseModel):
    """Raw image content plus its media type."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    media_type: str = DEFAULT_MEDIA_TYPE


def decode_user_file(
    file_bytes: bytes,
    declared_media_type: str | None = None,
    *,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> Image:
    """Wrap uploaded bytes into an Image, resolving the media type."""
    if not isinstance(file_bytes, (bytes, bytearray, memoryview)):
        raise UnsupportedInputError("Uploaded file could not be read as binary data.")
    data = bytes(file_bytes)
    if not data:
        raise UnsupportedInputError("Uploaded file is empty.")
    if len(data) > max_bytes:
        raise UnsupportedInputError(
            f"Uploaded file is too large ({len(data)} bytes). "
            f"The limit is {max_bytes // (1024 * 1024)}MB."
        )

    media_type = (declared_media_type or "").strip().lower()
    if media_type:
        if not _MEDIA_TYPE_PATTERN.match(media_type):
            raise UnsupportedInputError(f"Unsupported file type: {declared_media_type}")
        return Image(data=data, media_type=media_type)

    sniffed = _sniff_media_type(data)
    if sniffed is None:
        logger.warning(
            "No media type declared and the content was not recognised; "
            "assuming %s.",
            DEFAULT_MEDIA_TYPE,
        )
        return Image(data=data, media_type=DEFAULT_MEDIA_TYPE)
    return Image(data=data, media_type=sniffed)


def read_user_file(path: Path | str, *, max_bytes: int = MAX_UPLOAD_BYTES) -> Image:
    """Read an image file from disk."""
    source = Path(path).expanduser()
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise UnsupportedInputError(f"Could not read image file: {source}") from exc
    declared_media_type, _ = mimetypes.guess_type(source.name)
    return decode_user_file(data, declared_media_type, max_bytes=max_bytes)


def to_encoded(image: Image) -> str:
    """Encode an image as a ``data:`` URL."""
    payload = base64.b64encode(image.data).decode("ascii")
    return f"data:{image.media_type};base64,{payload}"


def from_encoded(encoded: str, default_media_type: str = DEFAULT_MEDIA_TYPE) -> Image:
    """Decode a data URL, or a bare base64 payload, back into an Image."""
    media_type = default_media_type
    payload = encoded
    if "," in encoded:
        header, payload = encoded.rsplit(",", maxsplit=1)
        match = _DATA_URL_HEADER_PATTERN.match(header.strip())
        if match:
            media_type = match.group(1).strip()

    payload = "".join(payload.split())
    if not payload:
        raise MalformedEncodingError("Encoded image has no payload.")
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEncodingError("Encoded image is not valid base64.") from exc
    return Image(data=data, media_type=media_type)


def _sniff_media_type(data: bytes) -> str | None:
    try:
        with PILImage.open(BytesIO(data)) as probe:
            image_format = probe.format
    except (UnidentifiedImageError, PILImage.DecompressionBombError, OSError, ValueError):
        return None
    if not image_format:
        return None
    return PILImage.MIME.get(image_format.upper())
