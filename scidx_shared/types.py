"""
Shared types, enums, and constants.
"""
from enum import Enum
from typing import Final, Literal

# Diff outcomes for a candidate index entry
DiffOutcome = Literal["added", "updated", "unchanged"]

# Length of a single 28-byte credential hash in hex
SCRIPT_HASH_LENGTH: Final[int] = 56

# Payment credential + staking credential, concatenated
FULL_CREDENTIAL_LENGTH: Final[int] = SCRIPT_HASH_LENGTH * 2


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Input
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    HASH_LENGTH = "HASH_LENGTH"

    # Lookup source availability
    DEGRADED = "DEGRADED"
    LOOKUP_UNAVAILABLE = "LOOKUP_UNAVAILABLE"
    LOOKUP_FAILED = "LOOKUP_FAILED"
    TIMEOUT = "TIMEOUT"

    # Persistence
    WRITE_FAILED = "WRITE_FAILED"


class ScriptType(str, Enum):
    """On-chain script kinds recorded in the index."""

    PLUTUS = "PLUTUS"
    NATIVE = "NATIVE"


# Plutus version reported for native (timelock) scripts
NATIVE_PLUTUS_VERSION: Final[int] = 0
