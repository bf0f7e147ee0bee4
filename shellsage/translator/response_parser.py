"""
Response parser for ShellSage.

This module converts the raw status/body pair returned by the remote service
into either a (command, explanation) pair or a typed error. The remote output
is free text from a model, so every extraction step degrades to an error
value instead of raising.
"""

import json
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from shellsage.models.generation_models import ErrorKind, ResponseEnvelope

logger = logging.getLogger(__name__)

SUCCESS_STATUS = 200
UNKNOWN_API_ERROR = "Unknown API error"
MALFORMED_BODY_ERROR = "Failed to parse LLM response JSON."
NO_CONTENT_ERROR = "Could not extract content from LLM response. Unexpected format."
CONTENT_FORMAT_ERROR = (
    "LLM response content is not in the expected format "
    "(command\\nexplanation). Received: {content}"
)


class ParseOutcome(BaseModel):
    """Either a parsed command/explanation or an error with its kind."""

    model_config = ConfigDict(frozen=True)

    command: Optional[str] = None
    explanation: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str, kind: ErrorKind) -> "ParseOutcome":
        return cls(error=error, error_kind=kind)


# Deeply nested bodies exhaust the decoder stack with RecursionError.
DECODE_ERRORS = (UnicodeDecodeError, ValueError, RecursionError)


def _load_json(body: bytes) -> Any:
    return json.loads(body.decode("utf-8"))


def extract_error_message(body: bytes) -> str:
    """
    Pull a human-readable message out of an error envelope.

    Looks for ``error.message`` first, then a top-level ``message``. Any
    decoding problem yields the generic message.
    """
    try:
        data = _load_json(body)
    except DECODE_ERRORS:
        return UNKNOWN_API_ERROR

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
    return UNKNOWN_API_ERROR


def parse_response(envelope: ResponseEnvelope) -> ParseOutcome:
    """
    Parse a remote response envelope.

    Args:
        envelope (ResponseEnvelope): Status code and raw body.

    Returns:
        ParseOutcome: The trimmed command and explanation, or an error.
    """
    if envelope.status != SUCCESS_STATUS:
        message = extract_error_message(envelope.body)
        logger.error("Remote service returned status %s: %s", envelope.status, message)
        return ParseOutcome.failed(
            f"API Error ({envelope.status}): {message}", ErrorKind.API_ERROR
        )

    try:
        data = _load_json(envelope.body)
    except DECODE_ERRORS as e:
        logger.error(f"Failed to parse API response: {e}")
        return ParseOutcome.failed(MALFORMED_BODY_ERROR, ErrorKind.MALFORMED_RESPONSE_BODY)

    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        logger.error("Response has no choices list")
        return ParseOutcome.failed(NO_CONTENT_ERROR, ErrorKind.UNEXPECTED_RESPONSE_SHAPE)

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        logger.error("Response choice has no text content")
        return ParseOutcome.failed(NO_CONTENT_ERROR, ErrorKind.NO_CONTENT_EXTRACTED)

    parts = [part.strip() for part in content.split("\n", 1)]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        logger.error("Response content is not in command/explanation form")
        return ParseOutcome.failed(
            CONTENT_FORMAT_ERROR.format(content=content),
            ErrorKind.MALFORMED_CONTENT_FORMAT,
        )

    return ParseOutcome(command=parts[0], explanation=parts[1])
