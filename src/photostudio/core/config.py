"""Global user configuration helpers."""

from __future__ import annotations

import os
from pathlib import Path
import tomllib

from pydantic import BaseModel, Field

GLOBAL_CONFIG_PATH = Path.home() / ".photostudio" / "config.toml"
GEMINI_API_KEY_NAME = "GEMINI_API_KEY"
_API_KEY_ENV_VARS = (GEMINI_API_KEY_NAME, "GOOGLE_API_KEY", "API_KEY")
DEFAULT_DOWNLOAD_FILE_NAME = "edited-image.png"


class GlobalConfig(BaseModel):
    """User-level configuration stored in ~/.photostudio/config.toml."""

    api_keys: dict[str, str] = Field(default_factory=dict)
    default_model: str = "flash"
    timeout_seconds: float = Field(default=120.0, gt=0)
    default_output_dir: str = "."
    download_file_name: str = DEFAULT_DOWNLOAD_FILE_NAME


def load_global_config(path: Path = GLOBAL_CONFIG_PATH) -> GlobalConfig:
    """Load global config from TOML, returning defaults when missing."""
    if not path.exists():
        return GlobalConfig()

    contents = path.read_text(encoding="utf-8")
    data = tomllib.loads(contents)
    return GlobalConfig.model_validate(data)


def save_global_config(config: GlobalConfig, path: Path = GLOBAL_CONFIG_PATH) -> None:
    """Persist global config to TOML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [
        f'default_model = "{_escape_toml_string(config.default_model)}"',
        f"timeout_seconds = {config.timeout_seconds}",
        f'default_output_dir = "{_escape_toml_string(config.default_output_dir)}"',
        f'download_file_name = "{_escape_toml_string(config.download_file_name)}"',
        "",
        "[api_keys]",
    ]
    for key, value in sorted(config.api_keys.items()):
        lines.append(f'{key} = "{_escape_toml_string(value)}"')

    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


def _escape_toml_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def apply_gemini_api_key(config: GlobalConfig, api_key: str) -> None:
    """Store the Gemini API key in the config."""
    cleaned_api_key = api_key.strip()
    if not cleaned_api_key:
        raise ValueError("API key cannot be empty.")
    config.api_keys[GEMINI_API_KEY_NAME] = cleaned_api_key


def get_gemini_api_key(config: GlobalConfig) -> str | None:
    """Resolve a Gemini API key from the config, then the environment."""
    configured = config.api_keys.get(GEMINI_API_KEY_NAME) or config.api_keys.get("gemini")
    if configured:
        return configured
    for env_var in _API_KEY_ENV_VARS:
        value = os.getenv(env_var)
        if value:
            return value
    return None
