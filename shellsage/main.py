"""
Main entry point for ShellSage CLI.

This module provides the command-line interface for ShellSage,
handling command-line arguments and rendering generation results.
"""

import asyncio
import importlib.metadata
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

# Import from our own modules
from shellsage.config import api_manager
from shellsage.config.settings import settings
from shellsage.executor import platform_utils
from shellsage.models.generation_models import GenerationRequest, GenerationResult
from shellsage.translator.orchestrator import GenerationOrchestrator
from shellsage.translator.prompt_builder import PromptBuilder
from shellsage.translator.transport import HttpxTransport
from shellsage.utils.logging import initialize_logging, setup_logging
from shellsage.validator.safety_scanner import scan_command

# Create Typer app
app = typer.Typer(
    name="shellsage",
    help="Turn a task description into a shell command, with safety warnings",
    add_completion=False,
)

# Set up console for rich output
console = Console()

_QUERY_ARG = typer.Argument(None, help="What you want to do, in plain words.")
_COMMAND_ARG = typer.Argument(..., help="The shell command to check.")


def get_version() -> str:
    """Get the installed version of ShellSage."""
    try:
        return importlib.metadata.version("shellsage")
    except importlib.metadata.PackageNotFoundError:
        return "0.1.0"  # Default during development


def configure_logging(debug: bool) -> None:
    if debug:
        setup_logging(log_level="DEBUG", log_file=settings.get_log_file_path())
    else:
        initialize_logging()


def render_warnings(warnings) -> None:
    for warning in warnings:
        console.print(f"[bold yellow]Warning:[/] {warning}")


def render_result(result: GenerationResult) -> None:
    """
    Display a generation result.

    Args:
        result (GenerationResult): The result to render.
    """
    if not result.is_success:
        console.print(f"[bold red]Error:[/] {result.error}")
        return

    title = "Suggested command"
    if result.source == "offline":
        title += " (offline)"

    body = Text()
    body.append(result.command, style="bold green")
    body.append("\n\n")
    body.append(result.explanation)
    console.print(Panel(body, title=title, border_style="green", expand=False))
    render_warnings(result.warnings)
    if result.warnings:
        console.print("[dim]Review the command carefully before running it.[/]")


@app.callback(invoke_without_command=True)
def callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-v", help="Show the application version and exit."
    ),
    reset_api_key: bool = typer.Option(
        False, "--reset-api-key", help="Reset the stored API key."
    ),
) -> None:
    """ShellSage - natural language to shell commands."""
    if ctx.invoked_subcommand is not None:
        return

    if version:
        console.print(f"[bold green]ShellSage CLI Version:[/] {get_version()}")
        raise typer.Exit()

    if reset_api_key:
        if api_manager.delete_api_key():
            console.print("[bold green]API key deleted successfully.[/]")
        else:
            console.print("[bold red]Failed to delete API key.[/]")
            raise typer.Exit(1)

        if typer.confirm("Do you want to set a new API key now?", default=True):
            new_key = typer.prompt("Enter your API key", hide_input=True)
            if api_manager.save_api_key(new_key):
                console.print("[bold green]API key saved successfully.[/]")
            else:
                console.print("[bold red]Failed to save API key.[/]")
                raise typer.Exit(1)
        raise typer.Exit()

    console.print(ctx.get_help())


@app.command()
def translate(
    query: Optional[List[str]] = _QUERY_ARG,
    target_os: Optional[str] = typer.Option(
        None, "--os", help="Target operating system (defaults to the current one)."
    ),
    target_shell: Optional[str] = typer.Option(
        None, "--shell", help="Target shell (defaults to the current one)."
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key (overrides stored key)."
    ),
    model: Optional[str] = typer.Option(
        None, "--model", "-m", help="Model to request completions from."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for the remote service."
    ),
    offline: bool = typer.Option(
        False, "--offline", help="Skip the remote service and use built-in templates."
    ),
    no_fallback: bool = typer.Option(
        False,
        "--no-fallback",
        help="Report API errors instead of falling back to built-in templates.",
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """
    Translate natural language to a shell command.

    The command is only suggested, never executed.
    """
    configure_logging(debug)

    if not query:
        console.print("[bold red]Error:[/] No query provided.")
        console.print('Usage: [bold]shellsage translate "your task here"[/]')
        raise typer.Exit(1)

    query_text = " ".join(query)

    if api_key and not api_manager.is_api_key_valid(api_key):
        console.print("[bold red]Invalid API key format.[/]")
        raise typer.Exit(1)
    credential = None if offline else (api_key or api_manager.get_api_key())

    request = GenerationRequest(
        query=query_text,
        env=platform_utils.build_environment(target_os, target_shell),
    )

    request_timeout = (
        timeout if timeout is not None else settings.get("api", "timeout", 30)
    )
    orchestrator = GenerationOrchestrator(
        transport=HttpxTransport(timeout=request_timeout),
        prompt_builder=PromptBuilder(
            model=model or settings.get("api", "model"),
            temperature=settings.get("api", "temperature", 0.2),
            max_tokens=settings.get("api", "max_tokens", 300),
        ),
        url=settings.get("api", "url"),
        timeout=request_timeout,
        fallback_on_api_error=not no_fallback
        and settings.get("generation", "fallback_on_api_error", True),
    )

    with console.status("[bold green]Generating command...[/]", spinner="dots"):
        result = asyncio.run(orchestrator.generate(request, credential, offline=offline))

    render_result(result)
    if not result.is_success:
        raise typer.Exit(1)


@app.command()
def check(command: str = _COMMAND_ARG) -> None:
    """
    Check a shell command for destructive patterns without running it.
    """
    warnings = scan_command(command)
    if not warnings:
        console.print("[bold green]No destructive patterns found.[/]")
        return
    render_warnings(warnings)
