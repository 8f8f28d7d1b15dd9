"""Shared utilities for the script index builder."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success
from .result import Result
from .time import now, timer, utc_iso
from .types import (
    FULL_CREDENTIAL_LENGTH,
    NATIVE_PLUTUS_VERSION,
    SCRIPT_HASH_LENGTH,
    DiffOutcome,
    ErrorCode,
    ScriptType,
)

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "now",
    "utc_iso",
    "timer",
    "ErrorCode",
    "ScriptType",
    "DiffOutcome",
    "SCRIPT_HASH_LENGTH",
    "FULL_CREDENTIAL_LENGTH",
    "NATIVE_PLUTUS_VERSION",
    "sanitize_error_message",
]
