"""Demo entry point: stream fake records through generators into Parquet."""

import logging
import sys
import time

from dotenv import load_dotenv

from .config import get_generator_config
from .streaming import (
    DataFrameTransformer,
    FakeRecordSource,
    ParquetWriter,
    RecordBatcher,
    StreamConfig,
    WriteStatistics,
)

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging.

    Args:
        level: Root log level name
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def print_summary(config: StreamConfig, stats: WriteStatistics, metadata: dict):
    """Print summary statistics.

    Args:
        config: Pipeline configuration
        stats: Statistics from Parquet writing
        metadata: Parquet file metadata
    """
    print("\n" + "=" * 80)
    print("EXECUTION SUMMARY")
    print("=" * 80)

    print("\nStreaming:")
    print(f"  Records requested: {config.num_records:,}")
    print(f"  Batch size: {config.batch_size:,}")
    print(f"  Rows written: {stats.total_rows:,}")
    print(f"  Batches written: {stats.total_batches}")

    print("\nParquet File:")
    print(f"  File path: {config.output_file}")
    print(f"  File size: {stats.file_size_bytes / (1024 * 1024):.2f} MB")
    print(f"  Row groups: {metadata['num_row_groups']}")
    print(f"  Compression: {config.compression}")
    print(f"  Time taken: {stats.elapsed_time:.2f} seconds")

    print("\n" + "=" * 80)


def run_pipeline(config: StreamConfig) -> WriteStatistics:
    """Run source -> batcher -> transformer -> Parquet writer.

    Nothing is produced until the writer pulls the first DataFrame, and at
    most one batch is held in memory at any time.

    Args:
        config: Pipeline configuration

    Returns:
        WriteStatistics from the Parquet writer
    """
    records = FakeRecordSource().records(config.num_records, config.fail_after)
    batches = RecordBatcher(config.batch_size).batch(records)
    dataframes = DataFrameTransformer().transform(batches)

    with ParquetWriter(config.output_file, config.compression) as writer:
        return writer.write(dataframes)


def main():
    """Main execution function."""
    # Load environment variables from .env file
    load_dotenv()
    generator_config = get_generator_config()
    setup_logging(generator_config.log_level)

    logger.info("Starting lazy generator streaming demo")
    logger.info("=" * 80)

    try:
        config = StreamConfig.from_env()

        logger.info(f"Number of records: {config.num_records:,}")
        logger.info(f"Batch size: {config.batch_size:,}")
        logger.info(f"Output file: {config.output_file}")
        logger.info(f"Propagate producer failures: {generator_config.propagate_failures}")

        start_time = time.time()
        stats = run_pipeline(config)
        logger.info(f"Pipeline completed in {time.time() - start_time:.2f} seconds")

        if stats.total_rows == 0:
            logger.warning("No rows were produced; no Parquet file was written")
            return 0

        print_summary(config, stats, ParquetWriter.read_metadata(config.output_file))

        logger.info("\nExecution completed successfully!")
        return 0

    except KeyboardInterrupt:
        logger.warning("\nExecution interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"\nError during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
