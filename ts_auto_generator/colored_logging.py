"""
Colored console logging for TS Auto Generator.

Log lines are colored by level, and INFO lines additionally by the marker the
``log_*`` helpers put in front of them, so a run reads as a list of phases
(discovery, extraction, emission) followed by the file that was written.
"""

import logging
import sys
from typing import Optional, TextIO


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps each line in an ANSI color chosen from its level or marker."""

    RESET = '\033[0m'
    BOLD = '\033[1m'

    LEVEL_COLORS = {
        logging.DEBUG: '\033[36m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }

    SUCCESS = '\033[92m'
    PROGRESS = '\033[94m'
    HIGHLIGHT = '\033[96m'

    SUCCESS_INDICATORS = (
        'complete', 'successfully', 'generated', 'written', 'saved',
        'done', '✓', 'success',
    )
    PROGRESS_INDICATORS = (
        'discovering', 'extracting', 'generating', 'building', 'resolving',
        'watching', 'starting', 'loading', '→',
    )
    HIGHLIGHT_INDICATORS = (
        'skipping', 'skipped', 'found', 'detected', 'changed', '•',
    )

    def __init__(self, fmt: Optional[str] = None, use_colors: bool = True, stream: Optional[TextIO] = None):
        """
        Args:
            fmt: Log format string, ``LEVEL: message`` when None
            use_colors: Set to False for plain output
            stream: Stream the handler writes to; colors are only used on a TTY
        """
        super().__init__(fmt or "%(levelname)s: %(message)s")
        stream = stream if stream is not None else sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted_message = super().format(record)
        if not self.use_colors:
            return formatted_message
        color = self.color_for(record)
        if not color:
            return formatted_message
        return f"{color}{formatted_message}{self.RESET}"

    def color_for(self, record: logging.LogRecord) -> str:
        """Returns the escape sequence for a record, or '' to leave it plain."""
        if record.levelno >= logging.WARNING:
            return self.LEVEL_COLORS.get(record.levelno, self.LEVEL_COLORS[logging.ERROR])

        message = record.getMessage()
        if self._is_section_message(message):
            return self.BOLD + self.HIGHLIGHT
        if self._matches(message, self.SUCCESS_INDICATORS):
            return self.SUCCESS + self.BOLD
        if self._matches(message, self.PROGRESS_INDICATORS):
            return self.PROGRESS
        if self._matches(message, self.HIGHLIGHT_INDICATORS):
            return self.HIGHLIGHT
        if record.levelno == logging.DEBUG:
            return self.LEVEL_COLORS[logging.DEBUG]
        return ''

    @staticmethod
    def _matches(message: str, indicators) -> bool:
        message_lower = message.lower()
        return any(indicator in message_lower for indicator in indicators)

    @staticmethod
    def _is_section_message(message: str) -> bool:
        return '=' * 20 in message or message.strip().isupper()


def setup_colored_logging(
    level: int = logging.INFO, use_colors: bool = True, stream: Optional[TextIO] = None
) -> None:
    """
    Routes all logging through a single colored stderr handler.

    Handlers installed earlier (by Django or a previous call in watch mode)
    are replaced so each line is printed once.

    Args:
        level: Root logging level
        use_colors: Whether to color the output
        stream: Output stream, stderr by default
    """
    stream = stream if stream is not None else sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors, stream=stream))
    handler.setLevel(level)

    root_logger = logging.getLogger()
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_colored_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def log_success(logger: logging.Logger, message: str) -> None:
    logger.info(f"✓ {message}")


def log_progress(logger: logging.Logger, message: str) -> None:
    logger.info(f"→ {message}")


def log_highlight(logger: logging.Logger, message: str) -> None:
    logger.info(f"• {message}")


def log_section(logger: logging.Logger, section_name: str) -> None:
    """Logs ``section_name`` upper-cased between two separator lines."""
    separator = "=" * 60
    logger.info(separator)
    logger.info(f"  {section_name.upper()}")
    logger.info(separator)
