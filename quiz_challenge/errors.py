"""
Quiz error types.

Every failure on the way from "player picked a topic" to "a question is on
screen" maps to one of these. All of them are recoverable: GameSession turns
them into a status message and lets the player pick a topic again.
"""

import json
from typing import Any


class QuizError(Exception):
    """Base class for all quiz errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingCredentialError(QuizError):
    """No API key was supplied. Raised locally, nothing is sent."""

    def __init__(self, message: str = "Enter an API key first.") -> None:
        super().__init__(message)


class ProviderCallError(QuizError):
    """The provider answered with a non-success status, or could not be reached."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ProviderResponseShapeError(QuizError):
    """A successful reply with no generated text in any known location."""

    def __init__(self, raw_reply: Any) -> None:
        super().__init__(f"Could not find any text in the provider response. Response: {_preview(raw_reply)}")
        self.raw_reply = raw_reply


class MalformedJsonError(QuizError):
    """The generated text is not JSON, even after fence stripping."""

    def __init__(self, parser_message: str, text: str) -> None:
        super().__init__(f"Could not parse the response JSON: {parser_message}\nReceived content: {text}")
        self.parser_message = parser_message
        self.text = text


class SchemaValidationError(QuizError):
    """The JSON parsed but does not describe a usable question."""

    def __init__(self, payload: Any, reason: str | None = None) -> None:
        detail = f" ({reason})" if reason else ""
        super().__init__(f"The response JSON does not have the expected format{detail}. Received: {_preview(payload)}")
        self.payload = payload
        self.reason = reason


def _preview(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError, RecursionError):
        return repr(value)
