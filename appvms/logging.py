# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging interface for AVMS.

Library modules (registry, rollout engine, manager) report what they do
through this interface instead of printing directly, so they stay usable
from the CLI, from tests, and from embedding applications alike.

The logger supports three output levels:
- Step: Always printed (for plan progress indicators)
- Verbose: Only printed when verbose mode is enabled (uploads, rollout summaries)
- Debug: Only printed when debug mode is enabled (per-device rollout progress)

Example:
    Configure global logger:
        ```python
        from appvms.logging import get_logger, set_global_logger

        set_global_logger(get_logger(verbose=True))
        ```

    Use in library code:
        ```python
        from appvms.logging import get_global_logger

        logger = get_global_logger()
        logger.verbose("REGISTRY", "Uploaded v2.0 for PhonePe")
        logger.debug("ROLLOUT", progress_bar(50.0))
        ```

Note:
    The default global logger is silent, so library calls print nothing
    unless the CLI (or the caller) configures one.
"""

from __future__ import annotations

from typing import Protocol

PROGRESS_BAR_WIDTH = 50


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "REGISTRY", "ROLLOUT").
            message: Log message.
        """
        ...

    def debug(self, prefix: str, message: str) -> None:
        """Print a debug log message.

        Args:
            prefix: Message prefix (e.g., "ROLLOUT", "COMPAT").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Logger that prints to stdout, honouring verbose and debug flags."""

    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        """Initialize logger with verbosity settings.

        Args:
            verbose: If True, print verbose messages.
            debug: If True, print debug messages (implies verbose).
        """
        self._verbose = verbose or debug
        self._debug = debug

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def verbose(self, prefix: str, message: str) -> None:
        if self._verbose:
            print(f"[{prefix}] {message}")

    def debug(self, prefix: str, message: str) -> None:
        if self._debug:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output."""

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass

    def debug(self, prefix: str, message: str) -> None:
        pass


_global_logger: Logger = SilentLogger()


def get_logger(verbose: bool = False, debug: bool = False) -> Logger:
    """Get a stdout logger with the given verbosity.

    Args:
        verbose: If True, logger will print verbose messages.
        debug: If True, logger will print debug messages (implies verbose).

    Returns:
        A DefaultLogger configured with the specified verbosity.
    """
    return DefaultLogger(verbose=verbose, debug=debug)


def get_global_logger() -> Logger:
    """Return the process-wide logger (silent unless configured)."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Args:
        logger: Logger instance to use as the global logger.

    Note:
        This affects every component constructed without an explicit
        logger. Pass logger instances directly for better isolation.
    """
    global _global_logger
    _global_logger = logger


def progress_bar(percent: float, width: int = PROGRESS_BAR_WIDTH) -> str:
    """Render a fixed-width text progress bar.

    Args:
        percent: Completion percentage; values outside 0-100 are clamped.
        width: Number of characters in the bar.

    Returns:
        A string of exactly ``width`` characters, filled with "#" for the
        completed share and "-" for the remainder.

    Example:
        ```python
        progress_bar(50.0, width=10)  # "#####-----"
        ```
    """
    percent = max(0.0, min(100.0, percent))
    filled = int(percent * width / 100)
    return "#" * filled + "-" * (width - filled)
