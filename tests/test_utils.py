"""Tests for utility functions."""

import logging
import sys
from unittest.mock import patch

from dfxml_writer.utils import CommandResult, make_command_line, run_command, setup_logger


class TestMakeCommandLine:
    """Test command line reconstruction."""

    def test_plain_arguments(self):
        assert make_command_line(["fiwalk", "-X", "out.xml"]) == "fiwalk -X out.xml"

    def test_arguments_with_spaces_are_quoted(self):
        assert make_command_line(["fiwalk", "My Disk.raw"]) == 'fiwalk "My Disk.raw"'

    def test_empty(self):
        assert make_command_line([]) == ""


class TestRunCommand:
    """Test run_command."""

    def test_captures_output(self):
        result = run_command([sys.executable, "-c", "import sys; print('out'); sys.exit(3)"])
        assert result.success
        assert result.exit_code == 3
        assert result.stdout.strip() == "out"

    def test_undecodable_output_kept(self):
        result = run_command(
            [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe raw')"]
        )
        assert result.success
        assert result.stdout.encode("utf-8", "surrogateescape") == b"\xff\xfe raw"

    def test_missing_binary(self):
        result = run_command(["definitely-not-a-real-binary-xyz"])
        assert not result.success
        assert result.exit_code == -1
        assert result.error

    def test_from_failure(self):
        result = CommandResult.from_failure("boom")
        assert result == CommandResult(success=False, exit_code=-1, error="boom")

    def test_os_error_is_reported(self):
        with patch("dfxml_writer.utils.subprocess.run", side_effect=PermissionError("denied")):
            result = run_command(["anything"])
        assert result.error == "denied"


class TestSetupLogger:
    """Test setup_logger."""

    def test_levels(self):
        assert setup_logger("dfxml_test_logger").level == logging.INFO
        assert setup_logger("dfxml_test_logger", verbose=True).level == logging.DEBUG

    def test_single_handler(self):
        logger = setup_logger("dfxml_test_handlers")
        setup_logger("dfxml_test_handlers")
        assert len(logger.handlers) == 1
