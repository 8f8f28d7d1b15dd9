"""
Human-facing build summary.
"""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from ...shared import log_structured, log_success

_RULE = "=" * 60


@dataclass
class BuildSummary:
    dry_run: bool
    added: int = 0
    updated: int = 0
    unchanged: int = 0
    rejected: int = 0
    rekeyed: int = 0
    script_count: int = 0
    project_count: int = 0
    projects_added: list[str] = field(default_factory=list)
    added_by_project: list[tuple[str, int]] = field(default_factory=list)
    skipped_records: list[str] = field(default_factory=list)
    backpropagated: list[str] = field(default_factory=list)
    records_failed: list[str] = field(default_factory=list)
    resolution: dict[str, int] = field(default_factory=dict)
    lookups_performed: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["added_by_project"] = [list(item) for item in self.added_by_project]
        return data


def emit_summary(summary: BuildSummary, logger: logging.Logger, *, index_written: bool = False) -> None:
    title = "Script index preview (dry run, nothing written)" if summary.dry_run else "Script index updated"
    logger.info(_RULE)
    logger.info(title)
    logger.info(_RULE)
    logger.info("  Added: %d", summary.added)
    logger.info("  Updated: %d", summary.updated)
    logger.info("  Unchanged: %d", summary.unchanged)
    if summary.rejected:
        logger.info("  Rejected (hash length): %d", summary.rejected)
    if summary.rekeyed:
        logger.info("  Normalized legacy keys: %d", summary.rekeyed)
    logger.info("  Projects added: %d", len(summary.projects_added))
    logger.info("  Records skipped: %d", len(summary.skipped_records))
    logger.info("  Project records to rewrite: %d", len(summary.backpropagated))
    logger.info("  Total scripts: %d", summary.script_count)
    logger.info("  Total projects: %d", summary.project_count)

    if summary.added_by_project:
        logger.info("Added by project:")
        for project_id, count in summary.added_by_project:
            logger.info("  %s: %d", project_id, count)
    logger.info(_RULE)

    for path in summary.records_failed:
        logger.warning("Project record not rewritten: %s", path)
    log_structured(logger, logging.DEBUG, "build summary", **summary.to_dict())
    if summary.dry_run:
        return
    if index_written:
        log_success(logger, f"Index committed with {summary.script_count} scripts")
    else:
        logger.error("Index was not written")
