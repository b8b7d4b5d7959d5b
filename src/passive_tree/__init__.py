"""Render passive skill trees laid out on concentric orbits."""

from .cache import CacheCorruptionError, FileStore, MemoryStore, SnapshotCache, cache_key
from .fetch import FetchFailure, FileFetcher, GraphQLFetcher
from .snapshot import (
    Bounds,
    DanglingReferenceError,
    GraphSnapshot,
    OrbitDataError,
    SnapshotFormatError,
    TreeDataError,
    TreeEdge,
    TreeNode,
    selection_from_ids,
    validate_snapshot,
)
from .view import SkillTreeView

__all__ = [
    "Bounds",
    "TreeNode",
    "TreeEdge",
    "GraphSnapshot",
    "TreeDataError",
    "SnapshotFormatError",
    "DanglingReferenceError",
    "OrbitDataError",
    "selection_from_ids",
    "validate_snapshot",
    "cache_key",
    "CacheCorruptionError",
    "MemoryStore",
    "FileStore",
    "SnapshotCache",
    "FetchFailure",
    "GraphQLFetcher",
    "FileFetcher",
    "SkillTreeView",
]
