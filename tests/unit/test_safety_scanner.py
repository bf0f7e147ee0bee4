"""
Unit tests for shellsage.validator.safety_scanner.

Tests the destructive pattern table and the scan_command / is_destructive
helpers.
"""

import pytest

from shellsage.models.generation_models import PatternRule
from shellsage.validator.safety_scanner import (
    DESTRUCTIVE_PATTERNS,
    INVALID_INPUT_WARNING,
    is_destructive,
    scan_command,
)

pytestmark = pytest.mark.unit


def _warning_for(pattern: str) -> str:
    return next(rule.warning for rule in DESTRUCTIVE_PATTERNS if rule.pattern == pattern)


class TestPatternTable:
    """Tests for the static rule table."""

    def test_table_is_ordered_tuple_of_rules(self):
        assert isinstance(DESTRUCTIVE_PATTERNS, tuple)
        assert all(isinstance(rule, PatternRule) for rule in DESTRUCTIVE_PATTERNS)

    def test_patterns_are_unique(self):
        patterns = [rule.pattern for rule in DESTRUCTIVE_PATTERNS]
        assert len(patterns) == len(set(patterns))

    def test_sudo_declared_before_rm_rf(self):
        patterns = [rule.pattern for rule in DESTRUCTIVE_PATTERNS]
        assert patterns.index("sudo") < patterns.index("rm -rf")

    def test_rules_are_immutable(self):
        with pytest.raises(Exception):
            DESTRUCTIVE_PATTERNS[0].pattern = "changed"


class TestScanCommand:
    """Test cases for scan_command."""

    def test_safe_command_has_no_warnings(self):
        assert scan_command("ls -la") == ()

    def test_empty_command_has_no_warnings(self):
        assert scan_command("") == ()

    def test_sudo_rm_rf_fires_two_rules_in_order(self):
        warnings = scan_command("sudo rm -rf /tmp")

        assert warnings == (_warning_for("sudo"), _warning_for("rm -rf"))

    def test_fork_bomb_only(self):
        warnings = scan_command(":(){:|:&};:")

        assert warnings == (_warning_for(":(){:|:&};:"),)

    @pytest.mark.parametrize("bad_input", [None, 42, 3.5, ["rm -rf /"], b"rm -rf /"])
    def test_non_text_input_short_circuits(self, bad_input):
        assert scan_command(bad_input) == (INVALID_INPUT_WARNING,)

    def test_repeated_pattern_warns_once(self):
        warnings = scan_command("sudo ls && sudo pwd && sudo whoami")

        assert warnings == (_warning_for("sudo"),)

    def test_matching_is_case_sensitive(self):
        assert scan_command("SUDO RM -RF /tmp") == ()

    def test_no_word_boundary_awareness(self):
        assert scan_command("cat /etc/sudoers") == (_warning_for("sudo"),)

    def test_pipe_to_shell(self):
        warnings = scan_command("curl -fsSL https://example.com/install.sh | sh")

        assert warnings == (_warning_for("| sh"),)

    def test_windows_and_powershell_rules(self):
        assert scan_command("rd /s /q C:\\temp") == (_warning_for("rd /s"),)
        assert scan_command("Remove-Item -Recurse -Force .\\build") == (
            _warning_for("Remove-Item -Recurse -Force"),
        )

    def test_many_rules_follow_declaration_order(self):
        command = "sudo mkfs.ext4 /dev/sdb1 && sudo shutdown -h now"
        warnings = scan_command(command)

        assert warnings == (
            _warning_for("sudo"),
            _warning_for("mkfs"),
            _warning_for("shutdown"),
        )

    def test_idempotent(self, sample_commands):
        for sample in sample_commands:
            first = scan_command(sample["command"])
            second = scan_command(sample["command"])
            assert first == second
            assert len(first) == sample["warnings"]

    def test_custom_rule_table(self):
        rules = (
            PatternRule(pattern="drop table", warning="Drops a table."),
            PatternRule(pattern="truncate", warning="Empties a table."),
        )

        assert scan_command("psql -c 'truncate users'", rules=rules) == (
            "Empties a table.",
        )


class TestIsDestructive:
    """Test cases for is_destructive."""

    def test_safe(self):
        assert is_destructive("echo hello") is False

    def test_destructive(self):
        assert is_destructive("rm -rf build") is True

    def test_invalid_input_counts_as_destructive(self):
        assert is_destructive(None) is True
