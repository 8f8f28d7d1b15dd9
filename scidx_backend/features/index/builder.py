"""
Script index builder/merger.

One pass, in order: load the existing index, read every project record,
upsert project entries, normalize/resolve/diff each script, stage rewrites
for records that gained classification, finalize metadata, then hand off to
the persistence gate. The pass state lives in a `BuildState` accumulator that
each stage takes and returns; nothing is kept at module level.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...adapters.lookup import ScriptLookup, build_lookup
from ...config import BuilderSettings
from ...shared import DiffOutcome, ErrorCode, Result, get_logger, sanitize_error_message, timer, utc_iso
from .diff_tracker import DiffTracker, build_script_entry, classify_entry
from .hash_normalizer import check_hash_length, normalize_hash, normalize_index_keys
from .index_file_ops import LoadedIndex, ScriptIndex, load_index, serialize_index
from .persistence import CommitReport, commit
from .records import ProjectRecord, ScriptRecord, iter_record_files, load_project_record
from .resolver import MetadataResolver
from .summary import BuildSummary, emit_summary

logger = get_logger(__name__)


@dataclass
class BuildState:
    index: ScriptIndex
    original_text: str | None = None
    baseline: dict[str, dict[str, Any]] = field(default_factory=dict)
    loaded_project_ids: frozenset[str] = frozenset()
    tracker: DiffTracker = field(default_factory=DiffTracker)
    records: list[ProjectRecord] = field(default_factory=list)
    staged: dict[Path, ProjectRecord] = field(default_factory=dict)
    claimed: dict[str, str] = field(default_factory=dict)
    projects_added: list[str] = field(default_factory=list)
    skipped_records: list[str] = field(default_factory=list)
    rejected: int = 0
    rekeyed: int = 0


@dataclass
class BuildResult:
    summary: BuildSummary
    index: ScriptIndex
    commit: CommitReport


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def load_stage(loaded: LoadedIndex) -> BuildState:
    index = loaded.index
    index.scripts, rekeyed = normalize_index_keys(index.scripts)
    if rekeyed:
        logger.info("Normalized %d legacy index key(s)", rekeyed)
    return BuildState(
        index=index,
        original_text=loaded.original_text,
        baseline=dict(index.scripts),
        loaded_project_ids=frozenset(index.projects),
        rekeyed=rekeyed,
    )


def enumerate_stage(state: BuildState, projects_dir: Path) -> BuildState:
    files = iter_record_files(projects_dir)
    logger.info("Processing %d project record file(s)...", len(files))
    for path in files:
        loaded = load_project_record(path)
        if not loaded.ok or loaded.data is None:
            logger.warning("Skipping %s: %s", path.name, loaded.error)
            state.skipped_records.append(str(path))
            continue
        state.records.append(loaded.data)
    return state


def upsert_project(state: BuildState, record: ProjectRecord) -> tuple[BuildState, bool]:
    """Replace the project entry wholesale. Returns True when the id is new."""
    project_id = record.project_id
    created = project_id not in state.index.projects
    state.index.projects[project_id] = record.index_entry()
    if created:
        state.projects_added.append(project_id)
    return state, created


async def process_script(
    state: BuildState,
    record: ProjectRecord,
    script: ScriptRecord,
    resolver: MetadataResolver,
    *,
    strict: bool,
) -> tuple[BuildState, DiffOutcome | None]:
    if not script.script_hash:
        logger.debug("Skipping script %r in %s: empty hash", script.name, record.path.name)
        return state, None

    key = normalize_hash(script.script_hash)
    checked = check_hash_length(key, strict=strict)
    if not checked.ok:
        logger.warning("Rejecting %s... (%s): %s", key[:16], record.project_id, checked.error)
        state.rejected += 1
        return state, None
    if checked.meta.get("non_canonical"):
        logger.warning(
            "Non-standard hash length (%d chars) for %s... in %s, indexing anyway",
            len(key),
            key[:16],
            record.project_id,
        )

    await resolver.resolve(record, script, key, state.index.scripts)

    project_id = record.project_id
    owner = state.claimed.get(key)
    if owner is not None and owner != project_id:
        logger.warning("Duplicate hash %s... - %s vs %s (keeping %s)", key[:16], owner, project_id, project_id)
    state.claimed[key] = project_id

    # Diff against the entry as loaded; an earlier claim in this run on the
    # same key is superseded, not compared against.
    prior = state.baseline.get(key)
    candidate = build_script_entry(project_id, script)
    outcome = classify_entry(candidate, prior)
    state.index.scripts[key] = prior if outcome == "unchanged" and prior is not None else candidate
    state.tracker.record(key, outcome, project_id)
    return state, outcome


def stage_backpropagation(state: BuildState, record: ProjectRecord) -> BuildState:
    if record.dirty:
        state.staged[record.path] = record
    return state


def finalize_stage(state: BuildState) -> BuildState:
    """
    Stamp a fresh `generatedAt` only when the serialized index would differ
    from what was loaded, so a no-op run leaves the file byte-identical.
    """
    index = state.index
    unchanged = (
        state.original_text is not None
        and index.generated_at is not None
        and serialize_index(index) == state.original_text
    )
    if not unchanged:
        index.generated_at = utc_iso()
    return state


@dataclass
class _Checkpoint:
    """Merge state before a project record, so a failing record leaves no partial changes."""

    scripts: dict[str, dict[str, Any]]
    projects: dict[str, dict[str, Any]]
    outcomes: dict[str, tuple[DiffOutcome, str]]
    claimed: dict[str, str]
    projects_added: int
    rejected: int
    resolution: Counter

    @classmethod
    def take(cls, state: BuildState, resolver: MetadataResolver) -> "_Checkpoint":
        return cls(
            scripts=dict(state.index.scripts),
            projects=dict(state.index.projects),
            outcomes=dict(state.tracker.outcomes),
            claimed=dict(state.claimed),
            projects_added=len(state.projects_added),
            rejected=state.rejected,
            resolution=Counter(resolver.outcomes),
        )

    def restore(self, state: BuildState, resolver: MetadataResolver) -> BuildState:
        state.index.scripts = self.scripts
        state.index.projects = self.projects
        state.tracker.outcomes = self.outcomes
        state.claimed = self.claimed
        del state.projects_added[self.projects_added:]
        state.rejected = self.rejected
        resolver.outcomes = self.resolution
        return state


def _pending_lookup_keys(state: BuildState, strict: bool) -> list[str]:
    keys: list[str] = []
    for record in state.records:
        for script in record.scripts:
            if not script.script_hash or script.classified:
                continue
            key = normalize_hash(script.script_hash)
            if strict and not check_hash_length(key, strict=True).ok:
                continue
            prior = state.index.scripts.get(key) or {}
            if prior.get("type") is not None and prior.get("plutusVersion") is not None:
                continue
            keys.append(key)
    return keys


def _summarize(state: BuildState, resolver: MetadataResolver, *, dry_run: bool) -> BuildSummary:
    tracker = state.tracker
    return BuildSummary(
        dry_run=dry_run,
        added=tracker.added,
        updated=tracker.updated,
        unchanged=tracker.unchanged,
        rejected=state.rejected,
        rekeyed=state.rekeyed,
        script_count=state.index.script_count,
        project_count=state.index.project_count,
        projects_added=list(state.projects_added),
        added_by_project=tracker.additions_by_project(),
        skipped_records=list(state.skipped_records),
        backpropagated=[str(path) for path in state.staged],
        resolution=dict(sorted(resolver.outcomes.items())),
        lookups_performed=resolver.lookups_performed,
    )


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class ScriptIndexBuilder:
    def __init__(self, settings: BuilderSettings, lookup: ScriptLookup | None = None):
        self.settings = settings
        self._lookup = lookup

    async def merge(self, state: BuildState, resolver: MetadataResolver) -> BuildState:
        strict = self.settings.strict_hash_length
        prefetched = await resolver.prefetch(_pending_lookup_keys(state, strict))
        if prefetched:
            logger.info("Looked up %d unclassified script hash(es)", prefetched)

        for record in state.records:
            checkpoint = _Checkpoint.take(state, resolver)
            try:
                state, created = upsert_project(state, record)
                if created:
                    logger.debug("New project %s", record.project_id)
                for script in record.scripts:
                    state, _ = await process_script(state, record, script, resolver, strict=strict)
                state = stage_backpropagation(state, record)
            except Exception as exc:
                logger.error(
                    "Error processing %s, discarding its changes: %s",
                    record.path.name,
                    sanitize_error_message(exc, "processing failed"),
                )
                state = checkpoint.restore(state, resolver)
                state.skipped_records.append(str(record.path))
        return state

    async def run(self, *, dry_run: bool = False) -> Result[BuildResult]:
        projects_dir = self.settings.projects_dir
        if not projects_dir.is_dir():
            logger.error("Project record directory not found: %s", projects_dir)
            return Result.Err(ErrorCode.NOT_FOUND, f"Project record directory not found: {projects_dir}")

        lookup = self._lookup if self._lookup is not None else build_lookup(self.settings)
        try:
            with timer("index build", logger):
                state = load_stage(load_index(self.settings.index_file))
                state = enumerate_stage(state, projects_dir)
                resolver = MetadataResolver(lookup)
                state = await self.merge(state, resolver)
                state = finalize_stage(state)
        finally:
            await lookup.aclose()

        summary = _summarize(state, resolver, dry_run=dry_run)
        committed = commit(
            index_file=self.settings.index_file,
            index_document=state.index.to_document(),
            staged=state.staged.values(),
            dry_run=dry_run,
        )
        report = committed.data if committed.ok else committed.meta.get("report")
        if report is None:
            report = CommitReport(dry_run=dry_run)
        summary.records_failed = list(report.records_failed)
        emit_summary(summary, logger, index_written=report.index_written)
        if not committed.ok:
            return Result.Err(committed.code, committed.error or "Commit failed", summary=summary, report=report)
        return Result.Ok(BuildResult(summary=summary, index=state.index, commit=report))


async def build_index(
    settings: BuilderSettings,
    *,
    dry_run: bool = False,
    lookup: ScriptLookup | None = None,
) -> Result[BuildResult]:
    return await ScriptIndexBuilder(settings, lookup=lookup).run(dry_run=dry_run)
