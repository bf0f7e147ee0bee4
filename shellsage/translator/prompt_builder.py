"""
Prompt builder for ShellSage.

This module turns a generation request into a chat-completions payload and
the HTTP request the transport sends. Everything here is deterministic: the
same query, OS and shell always produce byte-identical output.
"""

import json
from typing import Any, Dict, List

from shellsage.models.generation_models import GenerationRequest, RemoteRequest

EXAMPLE_QUERY = "list all files in the current directory"
EXAMPLE_RESPONSE = (
    "ls -la\n"
    "Lists all files in the current directory, including hidden ones, with details."
)


class PromptBuilder:
    """
    Builder for command-generation prompts.

    The system message pins the target OS and shell and the two-line response
    format; the user message carries the literal query, the target
    environment again, and a single example of the expected format.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_tokens: int = 300,
    ):
        """
        Initialize the prompt builder.

        Args:
            model (str): Model name sent with every payload.
            temperature (float): Sampling temperature.
            max_tokens (int): Completion token limit.
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_system_prompt(self, target_os: str, target_shell: str) -> str:
        return (
            "You are a command-line assistant. Translate the user's task into "
            f"exactly one command for {target_os} using the {target_shell} shell.\n"
            "Respond with exactly two lines and nothing else:\n"
            "Line 1: the command, with no markdown, quotes or code fences.\n"
            "Line 2: a brief, plain-English explanation of what the command does.\n"
            f"Only use syntax and tools available in {target_shell} on {target_os}."
        )

    def build_user_prompt(self, query: str, target_os: str, target_shell: str) -> str:
        return (
            f"Task: {query}\n"
            f"Target OS: {target_os}\n"
            f"Target shell: {target_shell}\n"
            "\n"
            "Example of the required format:\n"
            f"Task: {EXAMPLE_QUERY}\n"
            f"{EXAMPLE_RESPONSE}"
        )

    def build_messages(self, request: GenerationRequest) -> List[Dict[str, str]]:
        """
        Build the chat messages for a request.

        Args:
            request (GenerationRequest): The query and target environment.

        Returns:
            List[Dict[str, str]]: A system message followed by a user message.
        """
        env = request.env
        return [
            {
                "role": "system",
                "content": self.build_system_prompt(env.target_os, env.target_shell),
            },
            {
                "role": "user",
                "content": self.build_user_prompt(
                    request.query, env.target_os, env.target_shell
                ),
            },
        ]

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        """
        Build the chat-completions payload for a request.

        Args:
            request (GenerationRequest): The query and target environment.

        Returns:
            Dict[str, Any]: Payload ready for serialization.
        """
        return {
            "model": self.model,
            "messages": self.build_messages(request),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    @staticmethod
    def serialize_payload(payload: Dict[str, Any]) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    @staticmethod
    def build_headers(credential: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
        }

    def build_remote_request(
        self, request: GenerationRequest, credential: str, url: str
    ) -> RemoteRequest:
        """
        Build the full remote request (URL, serialized body and headers).

        Args:
            request (GenerationRequest): The query and target environment.
            credential (str): API credential for the Authorization header.
            url (str): Chat-completions endpoint.

        Returns:
            RemoteRequest: Request handed to the transport.
        """
        return RemoteRequest(
            url=url,
            body=self.serialize_payload(self.build_payload(request)),
            headers=self.build_headers(credential),
        )
