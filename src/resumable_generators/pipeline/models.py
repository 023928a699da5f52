"""Data models and configuration classes."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List

import pyarrow as pa


class TransactionStatus(str, Enum):
    """Transaction status enumeration."""

    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"


class Currency(str, Enum):
    """Currency enumeration."""

    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"


class Category(str, Enum):
    """Transaction category enumeration."""

    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    BILLS = "bills"


@dataclass
class Transaction:
    """Transaction data model."""

    transaction_id: str
    user_id: str
    amount: float
    currency: str
    status: str
    category: str
    timestamp: str
    merchant: str

    def to_dict(self) -> Dict:
        """Convert transaction to dictionary."""
        return {
            "transaction_id": self.transaction_id,
            "user_id": self.user_id,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "category": self.category,
            "timestamp": self.timestamp,
            "merchant": self.merchant,
        }


# Parquet schema of a written transaction block
TRANSACTION_SCHEMA = pa.schema(
    [
        ("transaction_id", pa.string()),
        ("user_id", pa.string()),
        ("amount", pa.float32()),
        ("currency", pa.string()),
        ("status", pa.string()),
        ("category", pa.string()),
        ("timestamp", pa.timestamp("us")),
        ("merchant", pa.string()),
        ("batch_number", pa.int64()),
    ]
)


@dataclass
class PageResponse:
    """API page response data model."""

    data: List[Transaction]
    page: int
    page_size: int
    has_more: bool


@dataclass
class PipelineConfig:
    """Pipeline configuration."""

    page_size: int = 100
    batch_size: int = 1000
    total_pages: int = 30
    compression: str = "snappy"
    output_file: Path = field(default_factory=lambda: Path("transactions.parquet"))
    seed: int = 42

    @classmethod
    def default(cls) -> "PipelineConfig":
        """Create default configuration."""
        return cls()

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Load pipeline configuration from environment variables."""
        return cls(
            page_size=int(os.getenv("PIPELINE_PAGE_SIZE", "100")),
            batch_size=int(os.getenv("PIPELINE_BATCH_SIZE", "1000")),
            total_pages=int(os.getenv("PIPELINE_TOTAL_PAGES", "30")),
            compression=os.getenv("PIPELINE_COMPRESSION", "snappy"),
            output_file=Path(os.getenv("PIPELINE_OUTPUT_FILE", "transactions.parquet")),
            seed=int(os.getenv("PIPELINE_SEED", "42")),
        )

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if self.batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if self.total_pages <= 0:
            raise ValueError("total_pages must be positive")
        self.output_file = Path(self.output_file)


@dataclass
class WriteStatistics:
    """Statistics for write operations."""

    total_rows: int = 0
    total_batches: int = 0
    file_size_bytes: int = 0
    elapsed_time: float = 0.0
