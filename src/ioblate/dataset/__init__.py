"""Persisted translation datasets and the merge engine.

Python 3.13+.
"""

from .keys import qualify, split_key
from .merge import LoadAggregate, MergeOutcome, merge_for_load, merge_for_save, regroup
from .store import DatasetStore

__all__ = [
    "DatasetStore",
    "LoadAggregate",
    "MergeOutcome",
    "merge_for_load",
    "merge_for_save",
    "qualify",
    "regroup",
    "split_key",
]
