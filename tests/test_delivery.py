"""
Tests for appvms.delivery module.
"""

from __future__ import annotations

from appvms.delivery import ConcatPatchGenerator, LoggingInstaller
from appvms.logging import get_logger


class TestConcatPatchGenerator:
    """Tests for the stand-in patch generator."""

    def test_patch_is_old_then_new(self):
        """Test that the patch is the concatenation of both contents."""
        assert ConcatPatchGenerator().compute_patch(b"abc", b"def") == b"abcdef"

    def test_empty_contents(self):
        """Test that empty contents give an empty patch."""
        assert ConcatPatchGenerator().compute_patch(b"", b"") == b""


class TestLoggingInstaller:
    """Tests for the stand-in installer."""

    def test_install_logged_when_verbose(self, capsys):
        """Test the install message at verbose level."""
        LoggingInstaller(get_logger(verbose=True)).perform_install("v2.0")

        assert "[DELIVERY] Installing app version: v2.0" in capsys.readouterr().out

    def test_update_logs_patch_size(self, capsys):
        """Test that the update message reports the patch size."""
        LoggingInstaller(get_logger(verbose=True)).perform_update(b"12345")

        assert "Updating app with diff pack (5 bytes)" in capsys.readouterr().out

    def test_silent_by_default(self, capsys):
        """Test that nothing is printed without a configured logger."""
        installer = LoggingInstaller()
        installer.perform_install("v2.0")
        installer.perform_update(b"x")

        assert capsys.readouterr().out == ""
