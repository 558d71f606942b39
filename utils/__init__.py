"""Shared utilities for the answer sheet tools."""

# Common utilities
from utils.common import format_bytes, elapsed

# Pattern definitions
from utils.patterns import (
    BYTE_SIZE,
    DISALLOWED_PATH_CHARS,
    LINE_BREAK,
    TOKEN_SEPARATOR,
    ZIP_NAME,
)

# HTTP utilities
from utils.http import HEADERS, USER_AGENT, SessionManager

# Configuration
from utils.config import (
    DEFAULT_OUTPUT_ROOT,
    NAVIGATION_TIMEOUT_MS,
    RESPONSE_FILE_NAME,
    RunConfig,
)

__all__ = [
    # Common
    "format_bytes",
    "elapsed",
    # Patterns
    "BYTE_SIZE",
    "DISALLOWED_PATH_CHARS",
    "LINE_BREAK",
    "TOKEN_SEPARATOR",
    "ZIP_NAME",
    # HTTP
    "HEADERS",
    "USER_AGENT",
    "SessionManager",
    # Config
    "DEFAULT_OUTPUT_ROOT",
    "NAVIGATION_TIMEOUT_MS",
    "RESPONSE_FILE_NAME",
    "RunConfig",
]
