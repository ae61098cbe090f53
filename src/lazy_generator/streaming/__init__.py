"""Streaming adapters feeding generators into DataFrame and file sinks."""

from .data_source import FakeRecordSource, RecordSourceError
from .models import StreamConfig, WriteStatistics
from .processors import DataFrameTransformer, RecordBatcher
from .writers import ParquetWriter

__all__ = [
    # Models
    "StreamConfig",
    "WriteStatistics",
    # Sources
    "FakeRecordSource",
    "RecordSourceError",
    # Processors
    "RecordBatcher",
    "DataFrameTransformer",
    # Writers
    "ParquetWriter",
]
