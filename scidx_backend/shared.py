"""Backend-facing alias for shared utilities."""

from __future__ import annotations

import scidx_shared as _root_shared

Result = _root_shared.Result
ErrorCode = _root_shared.ErrorCode
ScriptType = _root_shared.ScriptType
DiffOutcome = _root_shared.DiffOutcome
get_logger = _root_shared.get_logger
log_success = _root_shared.log_success
log_structured = _root_shared.log_structured
sanitize_error_message = _root_shared.sanitize_error_message
now = _root_shared.now
timer = _root_shared.timer
utc_iso = _root_shared.utc_iso
SCRIPT_HASH_LENGTH = _root_shared.SCRIPT_HASH_LENGTH
FULL_CREDENTIAL_LENGTH = _root_shared.FULL_CREDENTIAL_LENGTH
NATIVE_PLUTUS_VERSION = _root_shared.NATIVE_PLUTUS_VERSION

__all__ = list(_root_shared.__all__)
