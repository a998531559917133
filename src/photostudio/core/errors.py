"""Typed failures raised by the edit workflow."""

from __future__ import annotations


class PhotoStudioError(Exception):
    """Base class for recoverable photostudio failures."""


class UnsupportedInputError(PhotoStudioError):
    """The uploaded file is empty, unreadable or not an image."""


class MalformedEncodingError(PhotoStudioError):
    """An encoded image could not be decoded back to bytes."""


class UnknownTemplateError(PhotoStudioError):
    """No prompt template is registered under the requested id."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Unknown prompt template: '{template_id}'.")
        self.template_id = template_id


class InvalidRequestError(PhotoStudioError):
    """An edit request failed local validation before being sent."""


class EmptyResponseError(PhotoStudioError):
    """The model replied without a displayable image."""


class RemoteServiceError(PhotoStudioError):
    """Transport or provider-side failure while calling the model."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PreconditionError(PhotoStudioError):
    """generate() was called without an image or an instruction."""


class AlreadyInFlightError(PhotoStudioError):
    """generate() was called while another edit is still running."""
