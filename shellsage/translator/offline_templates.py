"""
Offline command templates for ShellSage.

Used when the remote service cannot be reached. Declaration order is the
tie-break: the first template with a matching keyword wins.
"""

from typing import Tuple

from shellsage.models.generation_models import OfflineTemplate

OFFLINE_TEMPLATES: Tuple[OfflineTemplate, ...] = (
    OfflineTemplate(
        keywords=frozenset({"list files", "show files", "list directory"}),
        command_template="ls -la",
        explanation_template=(
            "Lists all files in the current directory, including hidden ones, "
            "with details."
        ),
    ),
    OfflineTemplate(
        keywords=frozenset(
            {"current directory", "where am i", "working directory", "current folder"}
        ),
        command_template="pwd",
        explanation_template="Prints the current working directory.",
    ),
    OfflineTemplate(
        keywords=frozenset({"disk space", "disk usage", "free space"}),
        command_template="df -h",
        explanation_template="Shows disk usage for mounted filesystems in "
        "human-readable units.",
    ),
    OfflineTemplate(
        keywords=frozenset({"memory usage", "free memory", "ram usage"}),
        command_template="free -h",
        explanation_template="Shows used and available memory in human-readable "
        "units.",
    ),
    OfflineTemplate(
        keywords=frozenset({"running processes", "list processes", "show processes"}),
        command_template="ps aux",
        explanation_template="Lists all running processes with their owners and "
        "resource usage.",
    ),
    OfflineTemplate(
        keywords=frozenset({"find file", "search for file", "locate file"}),
        command_template='find . -name "<filename>"',
        explanation_template="Searches the current directory tree for a file by "
        "name; replace <filename> with the name to look for.",
    ),
    OfflineTemplate(
        keywords=frozenset({"search text", "find text", "grep", "search for text"}),
        command_template='grep -rn "<text>" .',
        explanation_template="Recursively searches files under the current "
        "directory for <text> and prints matching lines with line numbers.",
    ),
    OfflineTemplate(
        keywords=frozenset({"ip address", "network interfaces", "my ip"}),
        command_template="ip addr show",
        explanation_template="Shows the network interfaces and their IP addresses.",
    ),
    OfflineTemplate(
        keywords=frozenset({"git status", "changed files", "uncommitted changes"}),
        command_template="git status",
        explanation_template="Shows the working tree status of the current Git "
        "repository.",
    ),
    OfflineTemplate(
        keywords=frozenset({"current date", "current time", "what time"}),
        command_template="date",
        explanation_template="Prints the current date and time.",
    ),
)
