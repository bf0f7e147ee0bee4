from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNKNOWN = "unknown"


class ErrorKind(str, Enum):
    CREDENTIAL_MISSING = "credential_missing"
    TRANSPORT_FAILURE = "transport_failure"
    API_ERROR = "api_error"
    MALFORMED_RESPONSE_BODY = "malformed_response_body"
    UNEXPECTED_RESPONSE_SHAPE = "unexpected_response_shape"
    NO_CONTENT_EXTRACTED = "no_content_extracted"
    MALFORMED_CONTENT_FORMAT = "malformed_content_format"
    NO_OFFLINE_MATCH = "no_offline_match"
    INVALID_COMMAND_INPUT = "invalid_command_input"


class EnvironmentContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_os: str = Field(default=UNKNOWN, description="Target operating system")
    target_shell: str = Field(default=UNKNOWN, description="Target shell name")

    @field_validator("target_os", "target_shell", mode="before")
    @classmethod
    def _default_unknown(cls, value: Optional[str]) -> str:
        if value is None or not str(value).strip():
            return UNKNOWN
        return value


class GenerationRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str
    env: EnvironmentContext = Field(default_factory=EnvironmentContext)


class PatternRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., description="Literal substring to look for")
    warning: str = Field(..., description="Warning shown when the pattern is found")


class OfflineTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    keywords: FrozenSet[str]
    command_template: str
    explanation_template: str


class RemoteRequest(BaseModel):
    """Everything the transport needs to perform one remote call."""

    model_config = ConfigDict(frozen=True)

    url: str
    body: bytes
    headers: Dict[str, str] = Field(default_factory=dict)


class ResponseEnvelope(BaseModel):
    """Raw status/body pair handed back by the transport."""

    model_config = ConfigDict(frozen=True)

    status: int
    body: bytes = b""


class GenerationResult(BaseModel):
    """
    Outcome of a single generation request.

    Exactly one of ``error`` or the (``command``, ``explanation``) pair is
    populated. ``warnings`` is always present and is derived from the final
    command text only.
    """

    model_config = ConfigDict(frozen=True)

    command: Optional[str] = None
    explanation: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    source: Optional[str] = None

    @model_validator(mode="after")
    def _check_exclusive(self) -> "GenerationResult":
        has_command = self.command is not None or self.explanation is not None
        if self.error is not None and has_command:
            raise ValueError("a result cannot carry both an error and a command")
        if self.error is None and (self.command is None or self.explanation is None):
            raise ValueError("a successful result needs a command and an explanation")
        return self

    @property
    def is_success(self) -> bool:
        return self.error is None

    @classmethod
    def success(
        cls,
        command: str,
        explanation: str,
        warnings: Tuple[str, ...],
        source: str,
    ) -> "GenerationResult":
        return cls(
            command=command,
            explanation=explanation,
            warnings=tuple(warnings),
            source=source,
        )

    @classmethod
    def failure(
        cls, error: str, error_kind: ErrorKind, source: Optional[str] = None
    ) -> "GenerationResult":
        return cls(error=error, error_kind=error_kind, source=source)
