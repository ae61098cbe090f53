"""Data models and configuration classes for streaming pipelines."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class StreamConfig:
    """Streaming pipeline configuration."""

    num_records: int = 10000
    batch_size: int = 1000
    compression: str = "snappy"
    output_file: Path = field(default_factory=lambda: Path("output/records.parquet"))
    fail_after: Optional[int] = None

    @classmethod
    def default(cls) -> "StreamConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "StreamConfig":
        """Load pipeline configuration from environment variables."""
        fail_after = os.getenv("STREAM_FAIL_AFTER")
        return cls(
            num_records=int(os.getenv("STREAM_NUM_RECORDS", "10000")),
            batch_size=int(os.getenv("STREAM_BATCH_SIZE", "1000")),
            compression=os.getenv("STREAM_COMPRESSION", "snappy"),
            output_file=Path(os.getenv("STREAM_OUTPUT_FILE", "output/records.parquet")),
            fail_after=int(fail_after) if fail_after else None,
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        self.output_file = Path(self.output_file)
        if self.num_records < 0:
            raise ValueError("num_records must not be negative")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.fail_after is not None and self.fail_after < 0:
            raise ValueError("fail_after must not be negative")


@dataclass
class WriteStatistics:
    """Statistics for write operations."""

    total_rows: int = 0
    total_batches: int = 0
    file_size_bytes: int = 0
    elapsed_time: float = 0.0
