"""Photostudio: AI photo editing driven by natural-language instructions."""

__version__ = "0.1.0"

from photostudio.core.codec import Image, decode_user_file, from_encoded, to_encoded
from photostudio.core.interfaces import EditRequest, EditResult, ImageEditClient
from photostudio.core.session import EditSession, SessionState, SessionStatus
from photostudio.core.templates import DEFAULT_CATALOG, PromptTemplate, TemplateCatalog
from photostudio.engines.gemini import GeminiEditClient, GeminiModel

__all__ = [
    "DEFAULT_CATALOG",
    "EditRequest",
    "EditResult",
    "EditSession",
    "GeminiEditClient",
    "GeminiModel",
    "Image",
    "ImageEditClient",
    "PromptTemplate",
    "SessionState",
    "SessionStatus",
    "TemplateCatalog",
    "decode_user_file",
    "from_encoded",
    "to_encoded",
]
