"""Writer classes for Parquet format."""

import logging
import time
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from ..protocols import LoggerProtocol
from .models import WriteStatistics


class ParquetWriter:
    """
    Writes DataFrames to Parquet format.

    Single Responsibility: Handle Parquet file writing operations.
    Uses context manager pattern for resource management.
    """

    def __init__(
        self,
        output_path: Path,
        compression: str = "snappy",
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize Parquet writer.

        Args:
            output_path: Path to output Parquet file
            compression: Compression codec
            logger: Logger instance
        """
        self.output_path = Path(output_path)
        self.compression = compression
        self._logger = logger or logging.getLogger(__name__)
        self._writer: Optional[pq.ParquetWriter] = None
        self._schema: Optional[pa.Schema] = None
        self._total_rows = 0

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and close writer."""
        self.close()

    def write(self, dataframes: Iterable[pd.DataFrame]) -> WriteStatistics:
        """
        Write dataframes to Parquet file, one row group per DataFrame.

        Args:
            dataframes: Stream of DataFrames to write

        Returns:
            WriteStatistics with operation details

        Raises:
            ValueError: If a DataFrame schema doesn't match previous ones
        """
        start_time = time.time()
        batch_count = 0

        for df in dataframes:
            if df.empty:
                self._logger.warning("Received empty DataFrame, skipping...")
                continue

            table = pa.Table.from_pandas(df, preserve_index=False)

            # Initialize writer on first batch
            if self._writer is None:
                self.output_path.parent.mkdir(parents=True, exist_ok=True)
                self._schema = table.schema
                self._writer = pq.ParquetWriter(
                    str(self.output_path),
                    self._schema,
                    compression=self.compression,
                )

            if not table.schema.equals(self._schema):
                raise ValueError(
                    f"DataFrame schema mismatch. Expected {self._schema}, got {table.schema}"
                )

            self._writer.write_table(table)
            self._total_rows += len(df)
            batch_count += 1

            self._logger.info(f"Written {len(df)} rows (total: {self._total_rows})")

        elapsed_time = time.time() - start_time
        file_size = self.output_path.stat().st_size if self.output_path.exists() else 0

        self._logger.info(
            f"Successfully wrote {self._total_rows} total rows to {self.output_path}"
        )

        return WriteStatistics(
            total_rows=self._total_rows,
            total_batches=batch_count,
            file_size_bytes=file_size,
            elapsed_time=elapsed_time,
        )

    def close(self):
        """Close the Parquet writer."""
        if self._writer:
            self._writer.close()
            self._writer = None

    @staticmethod
    def read_metadata(parquet_path: Path) -> dict:
        """Read metadata from a Parquet file.

        Args:
            parquet_path: Path to the Parquet file

        Returns:
            Dictionary with metadata information
        """
        metadata = pq.ParquetFile(str(parquet_path)).metadata

        return {
            "num_rows": metadata.num_rows,
            "num_row_groups": metadata.num_row_groups,
            "num_columns": metadata.num_columns,
            "created_by": metadata.created_by,
        }
