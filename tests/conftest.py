"""
Shared test fixtures for ShellSage tests.

This module contains pytest fixtures that are shared across all test modules,
including fake transports, canned service responses and common test data.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, patch

import pytest
from faker import Faker

from shellsage.models.generation_models import (
    EnvironmentContext,
    GenerationRequest,
    ResponseEnvelope,
)
from shellsage.translator.orchestrator import GenerationOrchestrator
from shellsage.translator.prompt_builder import PromptBuilder

fake = Faker()


# ============================================================================
# Credential Fixtures
# ============================================================================


@pytest.fixture
def valid_api_key() -> str:
    """Return a usable API key for testing."""
    return "sk-" + "a" * 48


@pytest.fixture
def mock_keyring():
    """Mock the keyring module for testing."""
    with (
        patch("keyring.get_password") as mock_get,
        patch("keyring.set_password") as mock_set,
        patch("keyring.delete_password") as mock_delete,
    ):
        # Default behavior: no key stored
        mock_get.return_value = None
        mock_set.return_value = None
        mock_delete.return_value = None

        yield {"get": mock_get, "set": mock_set, "delete": mock_delete}


@pytest.fixture
def clean_environment():
    """Remove API key environment variables for the duration of a test."""
    with patch.dict(os.environ, {}, clear=False):
        for name in ("SHELLSAGE_API_KEY", "OPENAI_API_KEY"):
            os.environ.pop(name, None)
        yield


# ============================================================================
# Request Fixtures
# ============================================================================


@pytest.fixture
def linux_env() -> EnvironmentContext:
    return EnvironmentContext(target_os="Linux", target_shell="bash")


@pytest.fixture
def generation_request(linux_env) -> GenerationRequest:
    return GenerationRequest(query="list files in this folder", env=linux_env)


@pytest.fixture
def random_query() -> str:
    """A query that matches no offline template."""
    return fake.numerify("zzq-####-####")


# ============================================================================
# Remote Service Fixtures
# ============================================================================


def completion_body(content: Optional[str]) -> bytes:
    """Build a chat-completions success body with the given content."""
    return json.dumps(
        {
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": content},
                    "finish_reason": "stop",
                }
            ],
        }
    ).encode("utf-8")


def error_body(message: str, error_type: str = "invalid_request_error") -> bytes:
    return json.dumps({"error": {"message": message, "type": error_type}}).encode(
        "utf-8"
    )


@pytest.fixture
def success_envelope() -> ResponseEnvelope:
    return ResponseEnvelope(
        status=200, body=completion_body("  ls -la \nLists files.  ")
    )


@pytest.fixture
def make_transport():
    """Factory for AsyncMock transports returning or raising the given value."""

    def _make(result: Any = None, side_effect: Any = None) -> AsyncMock:
        transport = AsyncMock()
        if side_effect is not None:
            transport.side_effect = side_effect
        else:
            transport.return_value = result
        return transport

    return _make


@pytest.fixture
def make_orchestrator():
    """Factory for orchestrators wired to a fake transport."""

    def _make(transport, **kwargs) -> GenerationOrchestrator:
        kwargs.setdefault("url", "https://llm.example.test/v1/chat/completions")
        kwargs.setdefault("timeout", 5)
        return GenerationOrchestrator(
            transport=transport, prompt_builder=PromptBuilder(), **kwargs
        )

    return _make


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest.fixture
def sample_commands() -> List[Dict[str, Any]]:
    """Commands with the warnings count the scanner should report."""
    return [
        {"command": "ls -la", "warnings": 0},
        {"command": "sudo apt update", "warnings": 1},
        {"command": "sudo rm -rf /tmp", "warnings": 2},
        {"command": ":(){:|:&};:", "warnings": 1},
        {"command": "curl https://example.com/install.sh | sh", "warnings": 1},
    ]


@pytest.fixture(params=["bash", "zsh", "fish", "cmd", "powershell"])
def shell_type(request):
    """Parametrized fixture for different shell types."""
    return request.param


@pytest.fixture
def make_completion_body():
    return completion_body


@pytest.fixture
def make_error_body():
    return error_body


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so streams do not leak."""
    yield
    logger = logging.getLogger("shellsage")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
