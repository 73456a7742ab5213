"""Logging utilities for tilechase sessions.

Provides color-coded output to distinguish follower movement from economy events.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for event types
    BLUE = "\033[94m"      # Deterministic updates (pathfinding, movement)
    YELLOW = "\033[93m"    # Speech and player-facing messages
    RED = "\033[91m"       # Errors, breakages, fraud
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


# Markers for event types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"  # Deterministic update
LOG_TAG_SPEECH = "[say]"       # Overhead speech
LOG_TAG_ERROR = "[!]"          # Error
LOG_TAG_SUCCESS = "[✓]"        # Success
LOG_TAG_INFO = "[i]"           # Information


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if TILECHASE_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("TILECHASE_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def log_deterministic(message: str) -> None:
    """Log a deterministic update (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_speech(message: str) -> None:
    """Log something the follower says (yellow)."""
    print(colored(f"{LOG_TAG_SPEECH} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))
