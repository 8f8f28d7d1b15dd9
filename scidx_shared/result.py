"""
Ok/Err result values.

Loading, lookup, and commit steps return `Result[T]` so one bad record or one
failed request is reported and skipped instead of aborting the whole run.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from .types import ErrorCode

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Usage:
        loaded = load_project_record(path)
        if not loaded.ok:
            logger.warning("Skipping %s: %s", path.name, loaded.error)
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"  # an ErrorCode value when not ok
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        return Result(ok=True, data=data, code="OK", meta=meta)

    @staticmethod
    def Err(code: ErrorCode | str | Enum, error: str, **meta: Any) -> "Result[T]":
        code_value = code.value if isinstance(code, Enum) else code
        return Result(ok=False, error=error, code=str(code_value), meta=meta)

    def unwrap(self) -> T:
        """Return the data, or raise ValueError carrying the error code."""
        if self.ok and self.data is not None:
            return self.data
        raise ValueError(f"[{self.code}] {self.error}")
