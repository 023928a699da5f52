"""API client for fetching transaction data."""

import logging
import time
from typing import List, Optional

from faker import Faker

from ..protocols import LoggerProtocol
from .models import Category, Currency, PageResponse, Transaction, TransactionStatus


class TransactionAPIClient:
    """
    Simulated paginated API serving transaction data.

    Single Responsibility: Handles all API communication logic.
    """

    def __init__(
        self,
        page_size: int = 100,
        total_pages: int = 30,
        latency_seconds: float = 0.0,
        seed: int = 42,
        logger: Optional[LoggerProtocol] = None,
    ):
        """
        Initialize API client.

        Args:
            page_size: Number of records per page
            total_pages: Total number of pages available
            latency_seconds: Simulated API latency
            seed: Seed for the client's Faker instance
            logger: Logger instance (defaults to module logger)
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        if total_pages < 0:
            raise ValueError("total_pages must not be negative")
        self.page_size = page_size
        self.total_pages = total_pages
        self.latency_seconds = latency_seconds
        self.faker = Faker()
        self.faker.seed_instance(seed)
        self.pages_served = 0
        self._logger = logger or logging.getLogger(__name__)

    def fetch_page(self, page: int) -> PageResponse:
        """
        Fetch a single page of transactions.

        Args:
            page: Page number to fetch, starting at 1

        Returns:
            PageResponse containing transactions and metadata
        """
        if self._logger:
            self._logger.debug(f"Fetching page {page}...")

        if self.latency_seconds:
            time.sleep(self.latency_seconds)

        if page > self.total_pages:
            transactions: List[Transaction] = []
        else:
            transactions = self._generate_transactions_for_page(page)
        self.pages_served += 1

        return PageResponse(
            data=transactions,
            page=page,
            page_size=self.page_size,
            has_more=page < self.total_pages,
        )

    def _generate_transactions_for_page(self, page: int) -> List[Transaction]:
        """Generate transaction data for a specific page."""
        transactions = []
        start_id = (page - 1) * self.page_size

        for i in range(self.page_size):
            transaction = Transaction(
                transaction_id=f"TXN{start_id + i:08d}",
                user_id=f"USER{self.faker.random_int(1000, 9999)}",
                amount=round(self.faker.pyfloat(min_value=10, max_value=5000, right_digits=2), 2),
                currency=self.faker.random_element(list(Currency)).value,
                status=self.faker.random_element(list(TransactionStatus)).value,
                category=self.faker.random_element(list(Category)).value,
                timestamp=self.faker.date_time_between(start_date="-1y", end_date="now").isoformat(),
                merchant=self.faker.company(),
            )
            transactions.append(transaction)

        return transactions
