"""
Generation orchestrator for ShellSage.

This module sequences prompt building, the remote call, response parsing,
the offline fallback and the safety scan as an explicit state machine. The
transition table is a pure function of (state, event) so that fallback and
scanning order can be checked on their own.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from shellsage.models.generation_models import (
    ErrorKind,
    GenerationRequest,
    GenerationResult,
    OfflineTemplate,
    RemoteRequest,
    ResponseEnvelope,
)
from shellsage.translator.offline_matcher import match_offline
from shellsage.translator.offline_templates import OFFLINE_TEMPLATES
from shellsage.translator.prompt_builder import PromptBuilder
from shellsage.translator.response_parser import SUCCESS_STATUS, parse_response
from shellsage.translator.transport import (
    DEFAULT_API_URL,
    HttpxTransport,
    Transport,
    TransportError,
)
from shellsage.validator.safety_scanner import scan_command

logger = logging.getLogger(__name__)

CREDENTIAL_MISSING_ERROR = (
    "No API key available. Set SHELLSAGE_API_KEY or OPENAI_API_KEY, "
    "or use --offline."
)
NO_OFFLINE_MATCH_ERROR = "No offline template matches the query."

SOURCE_REMOTE = "remote"
SOURCE_OFFLINE = "offline"


class GenerationState(str, Enum):
    CHECKING_CREDENTIAL = "checking_credential"
    BUILDING_PROMPT = "building_prompt"
    AWAITING_RESPONSE = "awaiting_response"
    PARSING = "parsing"
    OFFLINE_FALLBACK = "offline_fallback"
    SCANNING = "scanning"
    DONE = "done"


class GenerationEvent(str, Enum):
    CREDENTIAL_OK = "credential_ok"
    CREDENTIAL_MISSING = "credential_missing"
    OFFLINE_REQUESTED = "offline_requested"
    PROMPT_BUILT = "prompt_built"
    RESPONSE_RECEIVED = "response_received"
    TRANSPORT_FAILED = "transport_failed"
    API_ERROR_FALLBACK = "api_error_fallback"
    PARSED = "parsed"
    PARSE_FAILED = "parse_failed"
    OFFLINE_MATCHED = "offline_matched"
    OFFLINE_UNMATCHED = "offline_unmatched"
    SCANNED = "scanned"


S = GenerationState
E = GenerationEvent

TRANSITIONS: Dict[Tuple[GenerationState, GenerationEvent], GenerationState] = {
    (S.CHECKING_CREDENTIAL, E.CREDENTIAL_OK): S.BUILDING_PROMPT,
    (S.CHECKING_CREDENTIAL, E.CREDENTIAL_MISSING): S.DONE,
    (S.CHECKING_CREDENTIAL, E.OFFLINE_REQUESTED): S.OFFLINE_FALLBACK,
    (S.BUILDING_PROMPT, E.PROMPT_BUILT): S.AWAITING_RESPONSE,
    (S.AWAITING_RESPONSE, E.RESPONSE_RECEIVED): S.PARSING,
    (S.AWAITING_RESPONSE, E.TRANSPORT_FAILED): S.OFFLINE_FALLBACK,
    (S.AWAITING_RESPONSE, E.API_ERROR_FALLBACK): S.OFFLINE_FALLBACK,
    (S.PARSING, E.PARSED): S.SCANNING,
    (S.PARSING, E.PARSE_FAILED): S.DONE,
    (S.OFFLINE_FALLBACK, E.OFFLINE_MATCHED): S.SCANNING,
    (S.OFFLINE_FALLBACK, E.OFFLINE_UNMATCHED): S.DONE,
    (S.SCANNING, E.SCANNED): S.DONE,
}


class InvalidTransitionError(RuntimeError):
    """Raised for a (state, event) pair the state machine does not define."""


def transition(state: GenerationState, event: GenerationEvent) -> GenerationState:
    """
    Return the state that follows ``state`` on ``event``.

    Raises:
        InvalidTransitionError: If the pair is not part of the machine.
    """
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransitionError(
            f"No transition from {state.value} on {event.value}"
        ) from None


@dataclass
class _Run:
    """Scratch data for one request; never exposed to callers."""

    request: GenerationRequest
    credential: Optional[str]
    offline: bool
    remote_request: Optional[RemoteRequest] = None
    envelope: Optional[ResponseEnvelope] = None
    command: Optional[str] = None
    explanation: Optional[str] = None
    source: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    fallback_kind: Optional[ErrorKind] = None
    fallback_reason: Optional[str] = None


class GenerationOrchestrator:
    """
    Drives one request from prompt to scanned result.

    The remote call is the only blocking step and is bounded by ``timeout``.
    A timeout or transport error, and by default any non-200 status, routes
    to the offline templates. Whatever command comes out, remote or offline,
    is passed through the safety scanner before the result is built.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        url: str = DEFAULT_API_URL,
        timeout: Optional[float] = 30.0,
        fallback_on_api_error: bool = True,
        templates: Tuple[OfflineTemplate, ...] = OFFLINE_TEMPLATES,
    ):
        """
        Initialize the orchestrator.

        Args:
            transport: Async callable performing the remote call. Defaults to
                an HttpxTransport with the same timeout.
            prompt_builder: Builder for the request payload.
            url (str): Chat-completions endpoint.
            timeout (Optional[float]): Upper bound for the remote call in
                seconds; None waits indefinitely.
            fallback_on_api_error (bool): Route non-200 responses to the
                offline templates instead of surfacing the API error.
            templates: Offline template table.
        """
        if transport is None:
            transport = HttpxTransport(timeout=timeout or 30.0)
        self.transport = transport
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.url = url
        self.timeout = timeout
        self.fallback_on_api_error = fallback_on_api_error
        self.templates = templates
        self.last_trace: Tuple[GenerationState, ...] = ()

        self._handlers: Dict[
            GenerationState, Callable[[_Run], Awaitable[GenerationEvent]]
        ] = {
            S.CHECKING_CREDENTIAL: self._check_credential,
            S.BUILDING_PROMPT: self._build_prompt,
            S.AWAITING_RESPONSE: self._await_response,
            S.PARSING: self._parse,
            S.OFFLINE_FALLBACK: self._offline_fallback,
            S.SCANNING: self._scan,
        }

    async def generate(
        self,
        request: GenerationRequest,
        credential: Optional[str],
        offline: bool = False,
    ) -> GenerationResult:
        """
        Generate a command for a request.

        Args:
            request (GenerationRequest): The query and target environment.
            credential (Optional[str]): API credential; empty means missing.
            offline (bool): Skip the remote service and use offline templates.

        Returns:
            GenerationResult: Exactly one result per call. If the calling task
            is cancelled, nothing is returned.
        """
        run = _Run(request=request, credential=credential, offline=offline)
        state = S.CHECKING_CREDENTIAL
        trace: List[GenerationState] = [state]

        while state is not S.DONE:
            event = await self._handlers[state](run)
            next_state = transition(state, event)
            logger.debug("%s --%s--> %s", state.value, event.value, next_state.value)
            state = next_state
            trace.append(state)

        self.last_trace = tuple(trace)

        if run.error is not None:
            return GenerationResult.failure(run.error, run.error_kind, source=run.source)
        return GenerationResult.success(
            command=run.command,
            explanation=run.explanation,
            warnings=run.warnings,
            source=run.source,
        )

    async def _check_credential(self, run: _Run) -> GenerationEvent:
        if run.offline:
            logger.info("Offline mode requested; skipping remote service")
            return E.OFFLINE_REQUESTED
        if not run.credential or not run.credential.strip():
            logger.error("No API key provided")
            run.error = CREDENTIAL_MISSING_ERROR
            run.error_kind = ErrorKind.CREDENTIAL_MISSING
            return E.CREDENTIAL_MISSING
        return E.CREDENTIAL_OK

    async def _build_prompt(self, run: _Run) -> GenerationEvent:
        run.remote_request = self.prompt_builder.build_remote_request(
            run.request, run.credential, self.url
        )
        return E.PROMPT_BUILT

    async def _await_response(self, run: _Run) -> GenerationEvent:
        try:
            envelope = await asyncio.wait_for(
                self.transport(run.remote_request), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Remote call exceeded {self.timeout}s; falling back")
            run.fallback_kind = ErrorKind.TRANSPORT_FAILURE
            run.fallback_reason = f"request timed out after {self.timeout}s"
            return E.TRANSPORT_FAILED
        except (TransportError, httpx.HTTPError) as e:
            logger.warning(f"Remote call failed ({e}); falling back")
            run.fallback_kind = ErrorKind.TRANSPORT_FAILURE
            run.fallback_reason = str(e) or type(e).__name__
            return E.TRANSPORT_FAILED

        run.envelope = envelope
        if envelope.status != SUCCESS_STATUS and self.fallback_on_api_error:
            reason = parse_response(envelope).error
            logger.warning(f"{reason}; falling back")
            run.fallback_kind = ErrorKind.API_ERROR
            run.fallback_reason = reason
            return E.API_ERROR_FALLBACK
        return E.RESPONSE_RECEIVED

    async def _parse(self, run: _Run) -> GenerationEvent:
        outcome = parse_response(run.envelope)
        run.source = SOURCE_REMOTE
        if not outcome.ok:
            run.error = outcome.error
            run.error_kind = outcome.error_kind
            return E.PARSE_FAILED
        run.command = outcome.command
        run.explanation = outcome.explanation
        return E.PARSED

    async def _offline_fallback(self, run: _Run) -> GenerationEvent:
        run.source = SOURCE_OFFLINE
        if run.fallback_kind is not None:
            logger.info("Using offline templates after %s", run.fallback_kind.value)
        match = match_offline(run.request.query, self.templates)
        if match is None:
            error = NO_OFFLINE_MATCH_ERROR
            if run.fallback_reason:
                error = f"{error} Remote service unavailable: {run.fallback_reason}"
            run.error = error
            run.error_kind = ErrorKind.NO_OFFLINE_MATCH
            return E.OFFLINE_UNMATCHED
        run.command = match.command
        run.explanation = match.explanation
        return E.OFFLINE_MATCHED

    async def _scan(self, run: _Run) -> GenerationEvent:
        run.warnings = scan_command(run.command)
        return E.SCANNED
