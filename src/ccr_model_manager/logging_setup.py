"""Logging configuration for the CLI.

Logs go to stderr so they never mix with ``--json`` output on stdout.
API keys from the CCR config are redacted on every handler.
"""

import logging
import re
import sys

_SECRET_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(Bearer\s+)\S+", re.IGNORECASE), r"\1[REDACTED]"),
    (re.compile(r"\bsk-[A-Za-z0-9_-]{10,}\b"), "[REDACTED_API_KEY]"),
    (
        re.compile(r"(api[_-]?key['\"]?\s*[=:]\s*)['\"]?[^'\",\s]+['\"]?", re.IGNORECASE),
        r"\1[REDACTED]",
    ),
]


class SecretRedactingFilter(logging.Filter):
    """Redacts API keys and bearer tokens from log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def redact(text: str) -> str:
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def setup_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Configure the package logger.

    Args:
        level: Level name from settings.
        verbose: Force DEBUG regardless of ``level``.
    """
    log_level = logging.DEBUG if verbose else getattr(
        logging, level.upper(), logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-8s %(name)s: %(message)s"))
    handler.addFilter(SecretRedactingFilter())

    package_logger = logging.getLogger("ccr_model_manager")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)
    package_logger.propagate = False
