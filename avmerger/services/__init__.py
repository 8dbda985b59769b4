"""
This package exposes the services that do the actual work of AV Merger:
scanning a directory for pairs, merging a pair, and concatenating videos.
"""
from .concat_service import ConcatTask
from .discovery_service import discover, resolve_pairs
from .merge_service import MergeTask

__all__ = ["ConcatTask", "MergeTask", "discover", "resolve_pairs"]
