"""Core primitives for photostudio."""

from photostudio.core.config import GLOBAL_CONFIG_PATH, GlobalConfig, load_global_config
from photostudio.core.errors import (
    AlreadyInFlightError,
    EmptyResponseError,
    InvalidRequestError,
    MalformedEncodingError,
    PhotoStudioError,
    PreconditionError,
    RemoteServiceError,
    UnknownTemplateError,
    UnsupportedInputError,
)

__all__ = [
    "GLOBAL_CONFIG_PATH",
    "AlreadyInFlightError",
    "EmptyResponseError",
    "GlobalConfig",
    "InvalidRequestError",
    "MalformedEncodingError",
    "PhotoStudioError",
    "PreconditionError",
    "RemoteServiceError",
    "UnknownTemplateError",
    "UnsupportedInputError",
    "load_global_config",
]
