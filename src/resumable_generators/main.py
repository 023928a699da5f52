"""Main entry point: run the resumable transaction pipeline."""

import logging
import sys

from .config import get_generator_config
from .pipeline.models import PipelineConfig
from .pipeline.runner import DataPipeline

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure logging.

    Args:
        level: Root log level name
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger().setLevel(level)


def print_summary(stats, config: PipelineConfig):
    """Print summary statistics."""
    print("\n" + "=" * 80)
    print("EXECUTION SUMMARY")
    print("=" * 80)
    print(f"  Output file: {config.output_file}")
    print(f"  Rows written: {stats.total_rows:,}")
    print(f"  Row groups: {stats.total_batches}")
    print(f"  File size: {stats.file_size_bytes / (1024 * 1024):.2f} MB")
    print(f"  Time taken: {stats.elapsed_time:.2f} seconds")
    print("=" * 80)


def main():
    """Main execution function."""
    generator_config = get_generator_config()
    setup_logging(generator_config.log_level)

    try:
        pipeline_config = PipelineConfig.from_env()
        logger.info(f"After exhaustion: {generator_config.after_exhaustion.value}")
        logger.info(f"Output file: {pipeline_config.output_file}")

        stats = DataPipeline(pipeline_config, generator_config=generator_config).execute()
        print_summary(stats, pipeline_config)
        return 0

    except Exception as e:
        logger.error(f"Error during execution: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
