# -*- coding: utf-8 -*-
"""
CodeVanta Logging Module
Lightweight logging with token redaction so secrets never reach log output.

Messages are routed to the stdlib "codevanta" logger; the host application
decides handlers and levels.
"""

import logging
import re

LOGGER_NAME = "codevanta"
_PREFIX = "[CodeVanta]"

_logger = logging.getLogger(LOGGER_NAME)


# (pattern, replacement) pairs applied in order
_REDACTIONS = [
    # OAuth access tokens
    (re.compile(r"ghp_[a-zA-Z0-9_]+"), "[REDACTED_ACCESS_TOKEN]"),
    # Fine-grained personal access tokens
    (re.compile(r"github_pat_[a-zA-Z0-9_]+"), "[REDACTED_PAT]"),
    (
        re.compile(r'("refresh_token"\s*:\s*)"([^"]*)"', re.IGNORECASE),
        r'\1"[REDACTED_REFRESH_TOKEN]"',
    ),
    (
        re.compile(r'("access_token"\s*:\s*)"([^"]*)"', re.IGNORECASE),
        r'\1"[REDACTED_ACCESS_TOKEN]"',
    ),
    (
        re.compile(r'"token"\s*:\s*"([a-zA-Z0-9_\-\.]+)"', re.IGNORECASE),
        r'"token": "[REDACTED_TOKEN]"',
    ),
    (
        re.compile(r"(Authorization\s*:\s*Bearer)\s+[A-Za-z0-9_\-\.~=+/]+", re.IGNORECASE),
        r"\1 [REDACTED]",
    ),
]


def _redact_sensitive(message):
    """
    Redact tokens from a log message.

    Covers ghp_* and github_pat_* tokens, "access_token" / "refresh_token" /
    "token" JSON values and Authorization: Bearer headers.
    """
    if not message:
        return message

    msg = str(message)
    for pattern, replacement in _REDACTIONS:
        msg = pattern.sub(replacement, msg)
    return msg


def _emit(level, label, message):
    safe_msg = _redact_sensitive(str(message))
    _logger.log(level, f"{_PREFIX} {label}: {safe_msg}")


def _with_exception(message, exception):
    if exception:
        return f"{message}: {_redact_sensitive(str(exception))}"
    return message


def info(message):
    """Log an informational message."""
    _emit(logging.INFO, "INFO", message)


def warning(message):
    """Log a warning message."""
    _emit(logging.WARNING, "WARNING", message)


def error(message):
    """Log an error message."""
    _emit(logging.ERROR, "ERROR", message)


def debug(message):
    """Log a debug message."""
    _emit(logging.DEBUG, "DEBUG", message)


def error_safe(message, exception=None):
    """
    Log an error with automatic exception redaction.

    Args:
        message: Error message prefix
        exception: Optional exception object to include (will be redacted)
    """
    error(_with_exception(message, exception))


def warning_safe(message, exception=None):
    """
    Log a warning with automatic exception redaction.

    Args:
        message: Warning message prefix
        exception: Optional exception object to include (will be redacted)
    """
    warning(_with_exception(message, exception))


def debug_safe(message, exception=None):
    """
    Log a debug message with automatic exception redaction.

    Args:
        message: Debug message prefix
        exception: Optional exception object to include (will be redacted)
    """
    debug(_with_exception(message, exception))
