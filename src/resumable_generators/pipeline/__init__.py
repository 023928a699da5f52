"""Transaction-to-Parquet pipeline built from resumable generators."""

from .api_client import TransactionAPIClient
from .bodies import PageReader, ParquetBlockSink, TransactionBatcher, TransactionStream
from .models import (
    TRANSACTION_SCHEMA,
    Category,
    Currency,
    PageResponse,
    PipelineConfig,
    Transaction,
    TransactionStatus,
    WriteStatistics,
)
from .runner import DataPipeline

__all__ = [
    # Models
    "Transaction",
    "PageResponse",
    "PipelineConfig",
    "WriteStatistics",
    "TransactionStatus",
    "Currency",
    "Category",
    "TRANSACTION_SCHEMA",
    # API Client
    "TransactionAPIClient",
    # Generator bodies
    "PageReader",
    "TransactionStream",
    "TransactionBatcher",
    "ParquetBlockSink",
    # Pipeline
    "DataPipeline",
]
