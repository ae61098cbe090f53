"""Data processing stages chaining generators together."""

import copy
import logging
from typing import Any, Iterable, List

import pandas as pd

from ..handles import Generator


class RecordBatcher:
    """
    Batches records into groups for efficient processing.

    Single Responsibility: Group a record stream into batches.
    """

    def __init__(self, batch_size: int = 1000):
        """
        Initialize batcher.

        Args:
            batch_size: Number of records per batch
        """
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.batch_size = batch_size

    def _batches(self, records: Iterable[Any]):
        batch: List[Any] = []
        for record in records:
            # A yielded value is only valid until the source advances again.
            batch.append(copy.copy(record))
            if len(batch) >= self.batch_size:
                yield batch
                batch = []

        # Yield remaining records
        if batch:
            yield batch

    def batch(self, records: Iterable[Any]) -> Generator[List[Any]]:
        """
        Batch records into groups.

        Args:
            records: Record stream, typically another Generator

        Returns:
            Generator of record lists; dropping it also releases the source
        """
        return Generator(self._batches, records)


class DataFrameTransformer:
    """
    Transforms record batches into pandas DataFrames.

    Single Responsibility: Convert record batches to DataFrames.
    """

    def _frames(self, batches: Iterable[List[Any]]):
        logger = logging.getLogger(__name__)
        for batch_num, batch in enumerate(batches, 1):
            df = pd.DataFrame(batch)
            df["batch_number"] = batch_num

            logger.info(f"Created DataFrame batch {batch_num} with {len(df)} records")
            yield df

    def transform(self, batches: Iterable[List[Any]]) -> Generator[pd.DataFrame]:
        """
        Transform batches to DataFrames.

        Args:
            batches: Stream of record batches

        Returns:
            Generator of DataFrames, one per batch
        """
        return Generator(self._frames, batches)
