"""Record accessors: where the engine's input records come from."""

from .http_accessor import AccessorConfig, HttpRecordAccessor
from .memory import InMemoryRecordAccessor
from .normalizer import RecordNormalizer
from .sqlite_accessor import SQLiteRecordAccessor

__all__ = [
    "AccessorConfig",
    "HttpRecordAccessor",
    "InMemoryRecordAccessor",
    "RecordNormalizer",
    "SQLiteRecordAccessor",
]
