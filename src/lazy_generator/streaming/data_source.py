"""Generate fake records lazily using Faker library."""

import logging
from typing import Any, Dict, Optional

from faker import Faker

from ..handles import Generator

logger = logging.getLogger(__name__)


class RecordSourceError(RuntimeError):
    """Raised by a record source configured to fail mid-stream."""


class FakeRecordSource:
    """Produce fake person records one at a time."""

    def __init__(self, seed: int = 42):
        """Initialize the record source.

        Args:
            seed: Random seed for reproducibility
        """
        self.faker = Faker()
        self.faker.seed_instance(seed)

    def make_record(self, record_id: int) -> Dict[str, Any]:
        """Build a single fake record."""
        return {
            "id": record_id,
            "name": self.faker.name(),
            "email": self.faker.email(),
            "city": self.faker.city(),
            "country": self.faker.country(),
            "job": self.faker.job(),
            "company": self.faker.company(),
        }

    def _produce(self, num_records: int, fail_after: Optional[int]):
        logger.info(f"Producing {num_records:,} fake records...")
        for i in range(num_records):
            if fail_after is not None and i >= fail_after:
                raise RecordSourceError(f"Record source failed after {fail_after:,} records")
            yield self.make_record(i)

            if (i + 1) % 10000 == 0:
                logger.debug(f"Produced {i + 1:,} records...")

        logger.info(f"Successfully produced {num_records:,} records")

    def records(
        self, num_records: int, fail_after: Optional[int] = None
    ) -> Generator[Dict[str, Any]]:
        """Lazily produce fake records.

        No record is built until the returned generator is advanced.

        Args:
            num_records: Number of records to produce
            fail_after: Raise RecordSourceError after this many records

        Returns:
            Generator of record dictionaries
        """
        return Generator(self._produce, num_records, fail_after)
