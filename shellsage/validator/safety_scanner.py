"""
Destructive-command scanner for ShellSage.

This module flags generated commands that could have irreversible or
system-damaging effects. Matching is a plain, case-sensitive substring test
against an ordered table of rules; every rule is checked and a command may
collect several warnings.
"""

import logging
from typing import Any, Tuple

from shellsage.models.generation_models import PatternRule

logger = logging.getLogger(__name__)

INVALID_INPUT_WARNING = "Invalid input: the command to scan must be text."

# Evaluated in declaration order; each rule contributes at most one warning.
DESTRUCTIVE_PATTERNS: Tuple[PatternRule, ...] = (
    PatternRule(
        pattern="sudo",
        warning="Runs with elevated (root) privileges.",
    ),
    PatternRule(
        pattern="rm -rf",
        warning="Recursively force-deletes files without confirmation.",
    ),
    PatternRule(
        pattern="rm -fr",
        warning="Recursively force-deletes files without confirmation.",
    ),
    PatternRule(
        pattern="mkfs",
        warning="Creates a filesystem, erasing all data on the target device.",
    ),
    PatternRule(
        pattern="dd if=",
        warning="Copies raw data with dd; a wrong target can overwrite a disk.",
    ),
    PatternRule(
        pattern="> /dev/sd",
        warning="Writes directly to a block device.",
    ),
    PatternRule(
        pattern=":(){:|:&};:",
        warning="Fork bomb: spawns processes until the system becomes unusable.",
    ),
    PatternRule(
        pattern="chmod -R 777",
        warning="Recursively makes files world-writable.",
    ),
    PatternRule(
        pattern="chown -R",
        warning="Recursively changes file ownership.",
    ),
    PatternRule(
        pattern="| sh",
        warning="Pipes content straight into a shell for execution.",
    ),
    PatternRule(
        pattern="| bash",
        warning="Pipes content straight into a shell for execution.",
    ),
    PatternRule(
        pattern="shutdown",
        warning="Shuts down or restarts the machine.",
    ),
    PatternRule(
        pattern="reboot",
        warning="Reboots the machine.",
    ),
    PatternRule(
        pattern="del /s",
        warning="Deletes files recursively (Windows).",
    ),
    PatternRule(
        pattern="rd /s",
        warning="Removes a directory tree (Windows).",
    ),
    PatternRule(
        pattern="format c:",
        warning="Formats the system drive (Windows).",
    ),
    PatternRule(
        pattern="Remove-Item -Recurse -Force",
        warning="Recursively force-deletes items (PowerShell).",
    ),
)


def scan_command(
    command: Any, rules: Tuple[PatternRule, ...] = DESTRUCTIVE_PATTERNS
) -> Tuple[str, ...]:
    """
    Scan a command for destructive patterns.

    Args:
        command: The command text to inspect.
        rules: Ordered rule table, defaults to DESTRUCTIVE_PATTERNS.

    Returns:
        Tuple[str, ...]: One warning per matching rule, in table order. A
        non-text command yields only INVALID_INPUT_WARNING.
    """
    if not isinstance(command, str):
        logger.warning("Refusing to scan non-text input of type %s", type(command))
        return (INVALID_INPUT_WARNING,)

    warnings = tuple(rule.warning for rule in rules if rule.pattern in command)
    if warnings:
        logger.info("Command matched %d destructive pattern(s)", len(warnings))
    return warnings


def is_destructive(command: Any) -> bool:
    """Return True when the scanner reports any warning for the command."""
    return bool(scan_command(command))
