"""
Logging utilities with consistent formatting and level indicators.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Final

# Indicators for log levels
LEVEL_MARKS: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

# Global logger prefix
PREFIX: Final[str] = "🗂️ scidx"


class MarkFormatter(logging.Formatter):
    """Formatter that prefixes each line with a level indicator."""

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single prefixed line."""
        mark = LEVEL_MARKS.get(record.levelname, "🗂️")

        # Format: 🗂️ scidx [✅] module: message
        log_format = f"{PREFIX} [{mark}] %(name)s: %(message)s"
        formatter = logging.Formatter(log_format)
        return formatter.format(record)


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a logger with the scidx prefix and level indicators.

    Args:
        name: Logger name (usually __name__)
        level: Optional logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger instance
    """
    # Clean name (drop the package prefix if present)
    if name.startswith("__main__"):
        name = "main"
    elif "." in name:
        parts = name.split(".")
        if "features" in parts:
            idx = parts.index("features")
            name = ".".join(parts[idx + 1:])
        elif parts[0] in ("scidx_backend", "scidx_shared"):
            name = ".".join(parts[1:])

    logger = logging.getLogger(f"scidx.{name}")

    if level is not None:
        logger.setLevel(level)
    elif not logger.handlers:
        # Default to INFO if not configured
        logger.setLevel(logging.INFO)

    # Add console handler if none exists
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(MarkFormatter())
        logger.addHandler(handler)

        # Prevent propagation to avoid duplicate logs
        logger.propagate = False

    return logger


# Add SUCCESS level
SUCCESS_LEVEL: Final[int] = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def log_success(logger: logging.Logger, message: str) -> None:
    """
    Log a success message with the ✅ indicator.

    Args:
        logger: Logger instance
        message: Success message
    """
    logger.log(SUCCESS_LEVEL, message)


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit a structured JSON log entry with contextual fields."""
    payload = {
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "context": context,
    }
    logger.log(level, json.dumps(payload, ensure_ascii=False))
