"""Edit client implementations for photostudio."""

from photostudio.engines.gemini import GeminiEditClient, GeminiModel

__all__ = ["GeminiEditClient", "GeminiModel"]
