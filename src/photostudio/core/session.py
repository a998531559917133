"""Edit session state machine.

An :class:`EditSession` owns the uploaded image, the current instruction and
the status of the latest edit. Presentation code forwards user actions to the
session and renders the immutable :class:`SessionState` snapshots it exposes.

Phases::

    Idle -> Validating -> InFlight -> Succeeded | Failed
                 ^                          |
                 +--------- generate() -----+

``set_image`` always returns the session to ``Idle``. Each ``generate`` call
gets a token; an outcome is only committed while the session is still
``InFlight`` with that same token, so late replies for a superseded or
cancelled request are dropped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
import itertools
import logging
from pathlib import Path

from photostudio.core import codec
from photostudio.core.codec import Image
from photostudio.core.errors import (
    AlreadyInFlightError,
    PhotoStudioError,
    PreconditionError,
)
from photostudio.core.interfaces import EditRequest, EditResult, ImageEditClient
from photostudio.core.templates import DEFAULT_CATALOG, TemplateCatalog

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class SessionStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Idle:
    status = SessionStatus.IDLE


@dataclass(frozen=True)
class Validating:
    status = SessionStatus.VALIDATING


@dataclass(frozen=True)
class InFlight:
    token: int
    status = SessionStatus.IN_FLIGHT


@dataclass(frozen=True)
class Succeeded:
    result: EditResult
    status = SessionStatus.SUCCEEDED


@dataclass(frozen=True)
class Failed:
    error_message: str
    status = SessionStatus.FAILED


Phase = Idle | Validating | InFlight | Succeeded | Failed


@dataclass(frozen=True)
class SessionState:
    """Snapshot of everything the presentation layer renders."""

    original_image: Image | None = None
    instruction: str = ""
    phase: Phase = Idle()

    @property
    def status(self) -> SessionStatus:
        return self.phase.status

    @property
    def result(self) -> EditResult | None:
        return self.phase.result if isinstance(self.phase, Succeeded) else None

    @property
    def error_message(self) -> str | None:
        return self.phase.error_message if isinstance(self.phase, Failed) else None

    @property
    def is_loading(self) -> bool:
        return isinstance(self.phase, (Validating, InFlight))

    @property
    def can_generate(self) -> bool:
        """Whether the generate control should be enabled."""
        return (
            self.original_image is not None
            and bool(self.instruction)
            and not self.is_loading
        )


StateListener = Callable[[SessionState], None]


class EditSession:
    """Single-user edit workflow driving an :class:`ImageEditClient`."""

    def __init__(
        self,
        client: ImageEditClient,
        *,
        catalog: TemplateCatalog = DEFAULT_CATALOG,
    ) -> None:
        self._client = client
        self._catalog = catalog
        self._state = SessionState()
        self._tokens = itertools.count(1)
        self._task: asyncio.Task[EditResult] | None = None
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked with every new state snapshot."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def set_image(self, file_bytes: bytes, declared_media_type: str | None = None) -> None:
        image = codec.decode_user_file(file_bytes, declared_media_type)
        self._replace_image(image)

    def load_image(self, path: Path | str) -> None:
        self._replace_image(codec.read_user_file(path))

    def set_instruction(self, text: str) -> None:
        self._set_state(replace(self._state, instruction=text))

    def apply_template(self, template_id: str) -> None:
        self.set_instruction(self._catalog.select(template_id))

    def cancel(self) -> None:
        """Abort the in-flight edit, if any, and return to Idle."""
        if not isinstance(self._state.phase, InFlight):
            return
        logger.debug("Cancelling in-flight edit %d.", self._state.phase.token)
        self._set_state(replace(self._state, phase=Idle()))
        self._cancel_task()

    async def generate(self) -> SessionState:
        """Run one edit for the current image and instruction."""
        state = self._state
        if isinstance(state.phase, (Validating, InFlight)):
            raise AlreadyInFlightError("An edit is already in progress.")
        if state.original_image is None or not state.instruction:
            raise PreconditionError("Please upload an image and enter a prompt.")

        self._set_state(replace(state, phase=Validating()))
        try:
            payload = codec.from_encoded(
                codec.to_encoded(state.original_image),
                default_media_type=state.original_image.media_type,
            )
        except PhotoStudioError as exc:
            self._set_state(replace(self._state, phase=Failed(str(exc))))
            return self._state

        request = EditRequest(
            image_data=payload.data,
            media_type=payload.media_type,
            instruction=state.instruction,
        )
        token = next(self._tokens)
        self._set_state(replace(self._state, phase=InFlight(token)))
        task = asyncio.ensure_future(self._client.submit(request))
        self._task = task
        try:
            result = await task
        except asyncio.CancelledError:
            if self._is_current(token):
                self._set_state(replace(self._state, phase=Idle()))
                raise
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return self._state
        except PhotoStudioError as exc:
            logger.info("Edit %d failed: %s", token, exc)
            self._commit(token, Failed(str(exc) or UNKNOWN_ERROR_MESSAGE))
        except Exception:
            logger.exception("Edit %d failed unexpectedly.", token)
            self._commit(token, Failed(UNKNOWN_ERROR_MESSAGE))
        else:
            self._commit(token, Succeeded(result))
        finally:
            if self._task is task:
                self._task = None
        return self._state

    def _replace_image(self, image: Image) -> None:
        self._set_state(replace(self._state, original_image=image, phase=Idle()))
        self._cancel_task()

    def _cancel_task(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    def _is_current(self, token: int) -> bool:
        phase = self._state.phase
        return isinstance(phase, InFlight) and phase.token == token

    def _commit(self, token: int, phase: Succeeded | Failed) -> None:
        if not self._is_current(token):
            logger.debug("Discarding stale outcome for edit %d.", token)
            return
        self._set_state(replace(self._state, phase=phase))

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
