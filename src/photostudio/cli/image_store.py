"""CLI helpers for writing edited image bytes to disk."""

from __future__ import annotations

from pathlib import Path

from photostudio.core.config import DEFAULT_DOWNLOAD_FILE_NAME
from photostudio.core.interfaces import EditResult


def save_result(
    result: EditResult,
    *,
    output_dir: Path,
    file_name: str = DEFAULT_DOWNLOAD_FILE_NAME,
) -> Path:
    """Persist the edited image and return the local path."""
    image = result.image
    if not image.data:
        raise ValueError("Edit result has no image bytes.")
    output_dir.mkdir(parents=True, exist_ok=True)
    local_path = output_dir / file_name
    local_path.write_bytes(image.data)
    return local_path
