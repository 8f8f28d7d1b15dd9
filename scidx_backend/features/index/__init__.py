"""
Index feature - script index building and merging.
"""
from .builder import BuildResult, BuildState, ScriptIndexBuilder, build_index
from .hash_normalizer import normalize_hash
from .summary import BuildSummary

__all__ = ["BuildResult", "BuildState", "BuildSummary", "ScriptIndexBuilder", "build_index", "normalize_hash"]
