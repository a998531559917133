from __future__ import annotations

import asyncio
from io import BytesIO
from types import SimpleNamespace

from PIL import Image as PILImage
import pytest

from photostudio.core.errors import (
    AlreadyInFlightError,
    PreconditionError,
    RemoteServiceError,
    UnknownTemplateError,
    UnsupportedInputError,
)
from photostudio.core.interfaces import EditRequest, EditResult, ImageEditClient
from photostudio.core.session import (
    UNKNOWN_ERROR_MESSAGE,
    EditSession,
    SessionState,
    SessionStatus,
)
from photostudio.core.templates import DEFAULT_CATALOG
from photostudio.engines.gemini import GeminiEditClient, GeminiModel

_RESULT = EditResult(encoded_image="data:image/png;base64,ZWRpdGVk", narrative_text="Done")


def _png_bytes() -> bytes:
    buffer = BytesIO()
    PILImage.new("RGB", (1, 1), color=(0, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


class _FakeClient(ImageEditClient):
    def __init__(
        self,
        result: EditResult = _RESULT,
        error: BaseException | None = None,
    ) -> None:
        self.result = result
        self.error = error
        self.requests: list[EditRequest] = []

    async def submit(self, request: EditRequest) -> EditResult:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.result


class _BlockingClient(ImageEditClient):
    """Waits for ``release``; optionally ignores cancellation to deliver a late reply."""

    def __init__(self, *, ignore_cancel: bool = False) -> None:
        self.release = asyncio.Event()
        self.ignore_cancel = ignore_cancel
        self.cancelled = False
        self.requests: list[EditRequest] = []

    async def submit(self, request: EditRequest) -> EditResult:
        self.requests.append(request)
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            if not self.ignore_cancel:
                raise
        return _RESULT


def _ready_session(client: ImageEditClient) -> EditSession:
    session = EditSession(client)
    session.set_image(_png_bytes(), "image/png")
    session.set_instruction("Make the sky look like a galaxy.")
    return session


async def _settle() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


def test_generate_succeeds_and_stores_the_result() -> None:
    client = _FakeClient()
    session = _ready_session(client)

    state = asyncio.run(session.generate())

    assert state.status is SessionStatus.SUCCEEDED
    assert state.result is not None
    assert state.result.narrative_text == "Done"
    assert state.error_message is None
    assert session.state is state
    assert len(client.requests) == 1
    assert client.requests[0].image_data == _png_bytes()
    assert client.requests[0].media_type == "image/png"
    assert client.requests[0].instruction == "Make the sky look like a galaxy."


def test_generate_without_image_fails_precondition_and_stays_idle() -> None:
    client = _FakeClient()
    session = EditSession(client)
    session.set_instruction("Make it brighter.")

    with pytest.raises(PreconditionError):
        asyncio.run(session.generate())

    assert session.state.status is SessionStatus.IDLE
    assert client.requests == []


def test_generate_with_empty_instruction_makes_no_network_call() -> None:
    client = _FakeClient()
    session = EditSession(client)
    session.set_image(_png_bytes(), "image/png")

    with pytest.raises(PreconditionError):
        asyncio.run(session.generate())

    assert session.state.status is SessionStatus.IDLE
    assert session.state.can_generate is False
    assert client.requests == []


def test_generate_timeout_moves_session_to_failed() -> None:
    class _SlowModels:
        async def generate_content(self, **kwargs: object) -> object:
            await asyncio.sleep(5)
            return SimpleNamespace(parts=[])

    client = object.__new__(GeminiEditClient)
    client.model = GeminiModel.FLASH
    client._api_model = GeminiModel.FLASH.api_model
    client._timeout_seconds = 0.01
    client._client = SimpleNamespace(aio=SimpleNamespace(models=_SlowModels()))
    session = _ready_session(client)

    state = asyncio.run(session.generate())

    assert state.status is SessionStatus.FAILED
    assert state.error_message
    assert state.result is None


def test_apply_template_sets_the_registered_instruction() -> None:
    session = EditSession(_FakeClient())

    session.apply_template("luxury-look")

    assert session.state.instruction == DEFAULT_CATALOG.select("luxury-look")


def test_apply_template_rejects_unknown_ids() -> None:
    session = EditSession(_FakeClient())

    with pytest.raises(UnknownTemplateError):
        session.apply_template("missing")
    assert session.state.instruction == ""


def test_failed_session_can_generate_again() -> None:
    client = _FakeClient(error=RemoteServiceError("The model request failed."))
    session = _ready_session(client)

    failed = asyncio.run(session.generate())
    client.error = None
    succeeded = asyncio.run(session.generate())

    assert failed.status is SessionStatus.FAILED
    assert failed.error_message == "The model request failed."
    assert succeeded.status is SessionStatus.SUCCEEDED
    assert succeeded.error_message is None


def test_unexpected_client_errors_become_a_generic_message() -> None:
    session = _ready_session(_FakeClient(error=KeyError("boom")))

    state = asyncio.run(session.generate())

    assert state.status is SessionStatus.FAILED
    assert state.error_message == UNKNOWN_ERROR_MESSAGE


def test_set_image_clears_the_previous_result() -> None:
    session = _ready_session(_FakeClient())
    asyncio.run(session.generate())

    session.set_image(_png_bytes(), "image/jpeg")

    assert session.state.status is SessionStatus.IDLE
    assert session.state.result is None
    assert session.state.original_image is not None
    assert session.state.original_image.media_type == "image/jpeg"


def test_set_image_with_empty_file_keeps_the_current_state() -> None:
    session = _ready_session(_FakeClient())
    before = session.state

    with pytest.raises(UnsupportedInputError):
        session.set_image(b"", "image/png")

    assert session.state is before


def test_listeners_observe_each_transition() -> None:
    session = _ready_session(_FakeClient())
    seen: list[SessionStatus] = []
    unsubscribe = session.subscribe(lambda state: seen.append(state.status))

    asyncio.run(session.generate())
    unsubscribe()
    session.set_instruction("Something else.")

    assert seen == [
        SessionStatus.VALIDATING,
        SessionStatus.IN_FLIGHT,
        SessionStatus.SUCCEEDED,
    ]


def test_second_generate_while_in_flight_is_rejected() -> None:
    async def _scenario() -> tuple[SessionState, int]:
        client = _BlockingClient()
        session = _ready_session(client)
        first = asyncio.create_task(session.generate())
        await _settle()
        assert session.state.status is SessionStatus.IN_FLIGHT
        assert session.state.is_loading is True

        with pytest.raises(AlreadyInFlightError):
            await session.generate()

        client.release.set()
        return await first, len(client.requests)

    state, request_count = asyncio.run(_scenario())

    assert state.status is SessionStatus.SUCCEEDED
    assert request_count == 1


def test_late_reply_after_set_image_is_discarded() -> None:
    async def _scenario() -> tuple[SessionState, SessionState, _BlockingClient]:
        client = _BlockingClient(ignore_cancel=True)
        session = _ready_session(client)
        first = asyncio.create_task(session.generate())
        await _settle()

        session.set_image(_png_bytes(), "image/png")
        first_state = await first
        return first_state, session.state, client

    first_state, final_state, client = asyncio.run(_scenario())

    assert client.cancelled is True
    assert first_state.status is SessionStatus.IDLE
    assert final_state.status is SessionStatus.IDLE
    assert final_state.result is None


def test_cancel_releases_the_request_and_returns_to_idle() -> None:
    async def _scenario() -> tuple[SessionState, _BlockingClient, EditSession]:
        client = _BlockingClient()
        session = _ready_session(client)
        first = asyncio.create_task(session.generate())
        await _settle()

        session.cancel()
        return await first, client, session

    state, client, session = asyncio.run(_scenario())

    assert client.cancelled is True
    assert state.status is SessionStatus.IDLE
    assert session.state.original_image is not None
    assert session.state.instruction == "Make the sky look like a galaxy."


def test_cancelling_the_caller_propagates_and_resets_to_idle() -> None:
    async def _scenario() -> tuple[EditSession, _BlockingClient]:
        client = _BlockingClient()
        session = _ready_session(client)
        first = asyncio.create_task(session.generate())
        await _settle()

        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first
        return session, client

    session, client = asyncio.run(_scenario())

    assert client.cancelled is True
    assert session.state.status is SessionStatus.IDLE


def test_whitespace_instruction_counts_as_non_empty() -> None:
    client = _FakeClient()
    session = _ready_session(client)
    session.set_instruction("  ")

    assert session.state.can_generate is True
    state = asyncio.run(session.generate())

    assert state.status is SessionStatus.SUCCEEDED
    assert client.requests[0].instruction == "  "
