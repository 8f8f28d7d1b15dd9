"""
Persistence gate - the only writer of the index and of project record files.

Staged project rewrites are committed before the index. If a run is cut short
between the two, the next run re-derives the same classifications, so the
order only costs redundant work, never consistency.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable
from uuid import uuid4

from ...shared import ErrorCode, Result, get_logger
from .index_file_ops import serialize_document
from .records import ProjectRecord

logger = get_logger(__name__)


@dataclass
class CommitReport:
    dry_run: bool
    records_written: list[str] = field(default_factory=list)
    records_failed: list[str] = field(default_factory=list)
    index_written: bool = False


def write_text_atomic(path: Path, payload: str) -> Result[bool]:
    # Atomic write to prevent a half-written file on crash/interruption.
    tmp = path.with_name(path.name + f".tmp_{uuid4().hex}")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(path)
        return Result.Ok(True)
    except OSError as exc:
        logger.error("Failed to write %s: %s", path, exc)
        try:
            tmp.unlink(missing_ok=True)
        except OSError as cleanup_exc:
            logger.debug("Could not remove temp file %s: %s", tmp, cleanup_exc)
        return Result.Err(ErrorCode.WRITE_FAILED, f"Failed to write {path}: {exc}", path=str(path))


def commit(
    *,
    index_file: Path,
    index_document: dict[str, Any],
    staged: Iterable[ProjectRecord],
    dry_run: bool,
) -> Result[CommitReport]:
    staged = list(staged)
    report = CommitReport(dry_run=dry_run)

    if dry_run:
        for record in staged:
            logger.info("  [preview] would rewrite %s", record.path.name)
        logger.info("[preview] would write index %s", index_file)
        return Result.Ok(report)

    for record in staged:
        written = write_text_atomic(record.path, serialize_document(record.to_document()))
        if written.ok:
            report.records_written.append(str(record.path))
            logger.info("  Updated project record %s", record.path.name)
        else:
            report.records_failed.append(str(record.path))

    written = write_text_atomic(index_file, serialize_document(index_document))
    if not written.ok:
        return Result.Err(ErrorCode.WRITE_FAILED, written.error or "Failed to write index", report=report)
    report.index_written = True
    return Result.Ok(report)
