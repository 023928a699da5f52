"""Pipeline orchestrator."""

import logging
import time
from typing import Optional

from ..config import GeneratorConfig
from ..factory import GeneratorFactory
from ..protocols import LoggerProtocol
from .api_client import TransactionAPIClient
from .bodies import PageReader, ParquetBlockSink, TransactionBatcher, TransactionStream
from .models import PipelineConfig, WriteStatistics


class DataPipeline:
    """
    Drives the resumable generator chain from the API to a Parquet file.

    Single Responsibility: Coordinate all pipeline components.
    Pages -> transactions -> batches are pulled one value per call and pushed
    into the Parquet sink, so only one batch is held in memory at a time.
    """

    def __init__(
        self,
        config: PipelineConfig,
        api_client: Optional[TransactionAPIClient] = None,
        generator_config: Optional[GeneratorConfig] = None,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration
            api_client: API client instance (built from ``config`` when omitted)
            generator_config: Configuration for every generator in the chain
            logger: Logger instance
        """
        self.config = config
        self.api_client = api_client or TransactionAPIClient(
            page_size=config.page_size,
            total_pages=config.total_pages,
            seed=config.seed,
        )
        self._logger = logger or logging.getLogger(__name__)

        generator_config = generator_config or GeneratorConfig.from_env()
        self.pages = GeneratorFactory(PageReader, generator_config, self._logger)
        self.transactions = GeneratorFactory(TransactionStream, generator_config, self._logger)
        self.batches = GeneratorFactory(TransactionBatcher, generator_config, self._logger)
        self.sinks = GeneratorFactory(ParquetBlockSink, generator_config, self._logger)

    def execute(self) -> WriteStatistics:
        """
        Execute the complete pipeline.

        Returns:
            WriteStatistics with operation results
        """
        if self._logger:
            self._logger.info("Starting API to Parquet pipeline...")
            self._logger.info(
                f"Target: {self.config.total_pages} pages × {self.config.page_size} records"
            )
            self._logger.info(f"Batch size: {self.config.batch_size} records per batch")

        start_time = time.time()

        # Closing the batcher closes the transaction stream and the page reader
        batches = self.batches.create(
            self.transactions.create(self.pages.create(self.api_client)),
            self.config.batch_size,
        )
        stats = WriteStatistics()
        with batches, self.sinks.create(self.config.output_file, self.config.compression) as sink:
            for batch in batches:
                stats = sink(batch)

        output = self.config.output_file
        stats.file_size_bytes = output.stat().st_size if output.exists() else 0
        stats.elapsed_time = time.time() - start_time

        if self._logger:
            self._logger.info(
                f"Pipeline completed in {stats.elapsed_time:.2f} seconds: "
                f"{stats.total_rows:,} rows, {stats.total_batches} batches, "
                f"{stats.file_size_bytes:,} bytes"
            )
        return stats
