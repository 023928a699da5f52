"""Resumable generator bodies for the transaction-to-Parquet pipeline."""

import logging
import time
from enum import Enum, auto
from pathlib import Path
from typing import List, Optional

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from ..definition import GeneratorDefinition, entry, on_teardown, resumes
from ..positions import EXHAUSTED, START
from ..protocols import GeneratorProtocol
from ..steps import finish, goto, yield_
from .api_client import TransactionAPIClient
from .models import TRANSACTION_SCHEMA, PageResponse, Transaction, WriteStatistics

logger = logging.getLogger(__name__)


class PageReader(GeneratorDefinition):
    """Yields one API page per resume until the API reports no more pages."""

    returns = PageResponse

    class Position(Enum):
        PAGE_SENT = auto()

    def __init__(self, client: TransactionAPIClient):
        self.client = client
        self.page = 1
        self.last: Optional[PageResponse] = None

    @entry
    def fetch(self):
        self.last = self.client.fetch_page(self.page)
        return yield_(self.last, at=self.Position.PAGE_SENT)

    @resumes(Position.PAGE_SENT)
    def advance(self):
        if not self.last.has_more:
            logger.info(f"Reached last page: {self.page}")
            return finish()
        self.page += 1
        return goto(START)


class TransactionStream(GeneratorDefinition):
    """
    Flattens a page generator into one transaction per resume.

    The current page's rows and the row index are kept between calls. The
    stream owns the page generator and closes it on teardown.
    """

    returns = Transaction

    class Position(Enum):
        ROW_SENT = auto()

    def __init__(self, pages: GeneratorProtocol):
        self.pages = pages
        self.rows: List[Transaction] = []
        self.index = 0
        self.pages_done = False

    @entry
    def next_row(self):
        if self.index < len(self.rows):
            return yield_(self.rows[self.index], at=self.Position.ROW_SENT)
        if self.pages_done:
            return finish()

        response = self.pages()
        if response is EXHAUSTED:
            self.pages_done = True
            return finish()
        self.rows = response.data
        self.index = 0
        self.pages_done = not response.has_more
        return goto(START)

    @resumes(Position.ROW_SENT)
    def advance(self):
        self.index += 1
        return goto(START)

    @on_teardown
    def close_pages(self):
        self.pages.close()


class TransactionBatcher(GeneratorDefinition):
    """Groups a transaction generator into lists of ``batch_size`` items."""

    returns = list

    class Position(Enum):
        BATCH_SENT = auto()

    def __init__(self, source: GeneratorProtocol, batch_size: int = 1000):
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.source = source
        self.batch_size = batch_size
        self.source_done = False

    @entry
    def fill(self):
        batch: List[Transaction] = []
        while len(batch) < self.batch_size:
            item = self.source()
            if item is EXHAUSTED:
                self.source_done = True
                break
            batch.append(item)

        # Don't forget the last partial batch
        if not batch:
            return finish()
        return yield_(batch, at=self.Position.BATCH_SENT)

    @resumes(Position.BATCH_SENT)
    def after_batch(self):
        if self.source_done:
            return finish()
        return goto(START)

    @on_teardown
    def close_source(self):
        self.source.close()


class ParquetBlockSink(GeneratorDefinition):
    """
    Writes one batch of transactions per resume as a Parquet row group.

    The Parquet writer is opened when the sink is created and closed by its
    teardown action, so the file is finalised however the caller stops.
    Each resume yields the cumulative WriteStatistics.
    """

    params = (list,)
    returns = WriteStatistics

    class Position(Enum):
        BLOCK_WRITTEN = auto()

    def __init__(self, output_path: Path, compression: str = "snappy"):
        self.output_path = Path(output_path)
        self.compression = compression
        self.writer = pq.ParquetWriter(
            str(self.output_path), TRANSACTION_SCHEMA, compression=compression
        )
        self.stats = WriteStatistics()
        self.started = time.time()
        logger.info(f"Opened Parquet writer for {self.output_path} ({compression})")

    @entry
    def write(self, batch: List[Transaction]):
        if batch:
            table = self._to_table(batch, self.stats.total_batches + 1)
            self.writer.write_table(table)
            self.stats.total_rows += table.num_rows
            self.stats.total_batches += 1
            logger.info(f"Written {table.num_rows} rows (total: {self.stats.total_rows})")

        self.stats.elapsed_time = time.time() - self.started
        snapshot = WriteStatistics(
            total_rows=self.stats.total_rows,
            total_batches=self.stats.total_batches,
            file_size_bytes=self._file_size(),
            elapsed_time=self.stats.elapsed_time,
        )
        return yield_(snapshot, at=self.Position.BLOCK_WRITTEN)

    @resumes(Position.BLOCK_WRITTEN)
    def next_block(self, batch: List[Transaction]):
        return goto(START)

    @on_teardown
    def close_writer(self):
        if self.writer is not None:
            self.writer.close()
            self.writer = None
            logger.info(
                f"Closed {self.output_path}: {self.stats.total_rows} rows "
                f"in {self.stats.total_batches} row group(s)"
            )

    def _file_size(self) -> int:
        return self.output_path.stat().st_size if self.output_path.exists() else 0

    @staticmethod
    def _to_table(batch: List[Transaction], batch_number: int) -> pa.Table:
        df = pd.DataFrame([t.to_dict() for t in batch])

        # Optimize data types
        df["amount"] = df["amount"].astype("float32")
        df["timestamp"] = pd.to_datetime(df["timestamp"], format="ISO8601")
        df["batch_number"] = batch_number

        return pa.Table.from_pandas(df, schema=TRANSACTION_SCHEMA, preserve_index=False)
