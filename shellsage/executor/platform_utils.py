"""
Platform detection for ShellSage.

This module works out the target operating system and shell when the user
does not override them.
"""

import os
import platform
import sys
from typing import Optional

from shellsage.models.generation_models import UNKNOWN, EnvironmentContext

OS_DISPLAY_NAMES = {
    "windows": "Windows",
    "darwin": "macOS",
    "linux": "Linux",
}


def is_windows() -> bool:
    """
    Check if the current platform is Windows.

    Returns:
        bool: True if Windows, False otherwise.
    """
    return platform.system().lower() == "windows"


def is_macos() -> bool:
    """
    Check if the current platform is macOS.

    Returns:
        bool: True if macOS, False otherwise.
    """
    return platform.system().lower() == "darwin"


def get_os_name() -> str:
    """
    Get a friendly name for the current operating system.

    Returns:
        str: "Windows", "macOS", "Linux", the raw platform name, or "unknown".
    """
    system_name = platform.system()
    if not system_name:
        return UNKNOWN
    return OS_DISPLAY_NAMES.get(system_name.lower(), system_name)


def detect_shell_name() -> Optional[str]:
    """
    Detect the current shell from environment variables.

    Returns:
        Optional[str]: Lower-case shell name without extension, or None.
    """
    if is_windows():
        # Git Bash / MINGW
        if "MINGW" in os.environ.get("MSYSTEM", ""):
            return "bash"
        if any(var.startswith("PS") for var in os.environ):
            if "PSCore" in os.environ.get("PSModulePath", "") or os.environ.get(
                "POWERSHELL_DISTRIBUTION_CHANNEL"
            ):
                return "pwsh"
            return "powershell"
    else:
        if "BASH_VERSION" in os.environ:
            return "bash"
        if "ZSH_VERSION" in os.environ:
            return "zsh"
        if "FISH_VERSION" in os.environ:
            return "fish"

    shell_path = os.environ.get("SHELL") or os.environ.get("COMSPEC")
    if not shell_path and is_windows():
        shell_path = "cmd.exe"
    if not shell_path:
        return None

    shell_name = os.path.basename(shell_path.replace("\\", "/")).lower()
    if "." in shell_name:
        shell_name = shell_name.split(".")[0]
    return shell_name or None


def build_environment(
    os_override: Optional[str] = None, shell_override: Optional[str] = None
) -> EnvironmentContext:
    """
    Build the target environment, preferring user overrides.

    Args:
        os_override (Optional[str]): OS name supplied by the user.
        shell_override (Optional[str]): Shell name supplied by the user.

    Returns:
        EnvironmentContext: Missing values become "unknown".
    """
    target_os = os_override or get_os_name()
    target_shell = shell_override or detect_shell_name()
    return EnvironmentContext(target_os=target_os, target_shell=target_shell)


def supports_ansi_colors() -> bool:  # pragma: no cover - terminal capability check
    """
    Check if the terminal supports ANSI colors.

    Returns:
        bool: True if ANSI colors are supported, False otherwise.
    """
    if is_windows():
        if os.environ.get("WT_SESSION") or os.environ.get("ANSICON"):
            return True
        try:
            if sys.getwindowsversion().major >= 10:
                return True
        except AttributeError:
            pass

    term_env = os.environ.get("TERM")
    if term_env and term_env != "dumb":
        return True

    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
