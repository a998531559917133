"""Shared helpers for provider error inspection."""

from __future__ import annotations

import ast
import re
from typing import Any

import httpx

_STATUS_CODE_PATTERN = re.compile(r"\b(4\d{2}|5\d{2})\b")
_MAX_DETAIL_CHARS = 240


def extract_status_code(exc: BaseException) -> int | None:
    """Best-effort extraction of HTTP-like status code from provider exceptions."""
    candidates: list[Any] = [
        getattr(exc, "status_code", None),
        getattr(exc, "code", None),
    ]
    response = getattr(exc, "response", None)
    if response is not None:
        candidates.append(getattr(response, "status_code", None))

    for candidate in candidates:
        coerced = _coerce_int(candidate)
        if coerced is not None and 400 <= coerced <= 599:
            return coerced

    message = " ".join(
        str(value)
        for value in (
            getattr(exc, "status", ""),
            str(exc),
        )
        if value
    )
    for match in _STATUS_CODE_PATTERN.findall(message):
        value = int(match)
        if 400 <= value <= 599:
            return value
    return None


def is_timeout_error(exc: BaseException) -> bool:
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return True
    return "timed out" in str(exc).lower()


def describe_provider_error(exc: BaseException) -> str:
    """Reduce a provider or transport failure to a message fit for display."""
    if is_timeout_error(exc):
        return "The model took too long to respond. Please try again."

    status_code = extract_status_code(exc)
    detail = _provider_detail(exc)
    haystack = " ".join(
        bit for bit in (exc.__class__.__name__, str(getattr(exc, "status", "")), detail) if bit
    ).lower()

    if status_code == 503 or "unavailable" in haystack or "high demand" in haystack:
        summary = "The model is temporarily unavailable. Please try again shortly."
    elif (
        status_code == 429
        or "rate limit" in haystack
        or "resource_exhausted" in haystack
        or "quota" in haystack
    ):
        summary = "Rate limit reached. Wait a moment, then retry."
    elif status_code in {401, 403} or "api key" in haystack or "permission" in haystack:
        summary = "The model provider rejected the API key. Check your Gemini key."
    elif isinstance(exc, httpx.TransportError) or (
        "connection" in haystack and ("refused" in haystack or "reset" in haystack)
    ):
        summary = "A network problem interrupted communication with the model."
    elif status_code is not None and status_code < 500:
        summary = "The model rejected the edit request."
    else:
        summary = "The model request failed."

    if detail and detail.lower() not in summary.lower():
        return f"{summary} ({detail})"
    return summary


def _provider_detail(exc: BaseException) -> str:
    raw_message = str(exc)
    payload = _extract_payload_from_text(raw_message) or _extract_payload_from_response(exc)
    if isinstance(payload, dict):
        error_payload = payload.get("error", payload)
        if isinstance(error_payload, dict):
            payload_message = _normalize_text(str(error_payload.get("message", "")))
            if payload_message:
                return payload_message
    provider_message = getattr(exc, "message", None)
    if isinstance(provider_message, str) and provider_message.strip():
        return _normalize_text(provider_message)
    return _normalize_text(raw_message)


def _extract_payload_from_text(raw_message: str) -> dict[str, Any] | None:
    payload_start = raw_message.find("{")
    if payload_start < 0:
        return None
    payload_text = raw_message[payload_start:]
    try:
        payload = ast.literal_eval(payload_text)
    except (SyntaxError, ValueError):
        return None
    if isinstance(payload, dict):
        return payload
    return None


def _extract_payload_from_response(exc: BaseException) -> dict[str, Any] | None:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    response_json = getattr(response, "json", None)
    if not callable(response_json):
        return None
    try:
        payload = response_json()
    except (TypeError, ValueError):
        return None
    if isinstance(payload, dict):
        return payload
    return None


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _normalize_text(text: str) -> str:
    collapsed = " ".join(text.split())
    if len(collapsed) <= _MAX_DETAIL_CHARS:
        return collapsed
    return f"{collapsed[:_MAX_DETAIL_CHARS - 3]}..."
