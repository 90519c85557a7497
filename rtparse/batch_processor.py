#!/usr/bin/env python3
"""
Batch processor for parsing many release titles.

Titles are parsed in fixed-size batches, sequentially or on a thread pool,
with progress reporting and basic throughput metrics. Results always come
back in input order.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .result import ParseResult


@dataclass
class BatchResult:
    total_titles: int
    parsed_titles: int
    failed_titles: int
    results: List[ParseResult] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    processing_time: float = 0.0
    titles_per_second: float = 0.0


ProgressCallback = Callable[[int, int], None]


class BatchProcessor:
    def __init__(self, parser: Any, batch_size: int = 100, max_workers: int = 4) -> None:
        """
        Args:
            parser: Object with a parse(title) -> ParseResult method
            batch_size: Titles per batch
            max_workers: Thread pool size for parse_many_parallel
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.parser = parser
        self.batch_size = batch_size
        self.max_workers = max_workers

        self.start_time: Optional[float] = None
        self.processed_count = 0
        self.error_count = 0

        self.logger = logging.getLogger(__name__)

    def _batches(self, titles: Sequence[str]) -> List[List[str]]:
        return [list(titles[i : i + self.batch_size]) for i in range(0, len(titles), self.batch_size)]

    def _parse_batch(self, batch: Sequence[str]) -> List[ParseResult]:
        return [self.parser.parse(title) for title in batch]

    def _summarize(self, titles: Sequence[str], results: List[ParseResult]) -> BatchResult:
        errors = [
            {"index": idx, "title": title, "error": result.error}
            for idx, (title, result) in enumerate(zip(titles, results))
            if result.error is not None
        ]
        self.error_count = len(errors)

        processing_time = time.time() - (self.start_time or time.time())
        titles_per_second = (len(titles) / processing_time) if processing_time > 0 else 0.0

        return BatchResult(
            total_titles=len(titles),
            parsed_titles=len(results) - len(errors),
            failed_titles=len(errors),
            results=results,
            errors=errors,
            processing_time=processing_time,
            titles_per_second=titles_per_second,
        )

    def parse_many(
        self,
        titles: Sequence[str],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Parse titles batch by batch on the calling thread."""
        self.start_time = time.time()
        self.processed_count = 0

        total_titles = len(titles)
        results: List[ParseResult] = []

        self.logger.info("Starting batch parsing of %s titles", total_titles)

        for batch_number, batch in enumerate(self._batches(titles), 1):
            self.logger.info("Parsing batch %s (%s titles)", batch_number, len(batch))
            results.extend(self._parse_batch(batch))

            self.processed_count += len(batch)
            if progress_callback:
                progress_callback(self.processed_count, total_titles)

        return self._summarize(titles, results)

    def parse_many_parallel(
        self,
        titles: Sequence[str],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """Parse batches on a thread pool. The rule table is shared read-only."""
        self.start_time = time.time()
        self.processed_count = 0

        total_titles = len(titles)
        batches = self._batches(titles)
        batch_results: Dict[int, List[ParseResult]] = {}

        self.logger.info(
            "Starting parallel parsing of %s titles in %s batches", total_titles, len(batches)
        )

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_batch = {
                executor.submit(self._parse_batch, batch): number for number, batch in enumerate(batches)
            }

            for future in as_completed(future_to_batch):
                number = future_to_batch[future]
                batch_results[number] = future.result()

                self.processed_count += len(batches[number])
                if progress_callback:
                    progress_callback(self.processed_count, total_titles)

        results = [result for number in range(len(batches)) for result in batch_results[number]]
        return self._summarize(titles, results)

    def get_performance_stats(self) -> Dict[str, Any]:
        if not self.start_time:
            return {"status": "no_processing_started"}

        elapsed_time = time.time() - self.start_time
        current_rate = (self.processed_count / elapsed_time) if elapsed_time > 0 else 0.0

        return {
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "elapsed_time": elapsed_time,
            "current_rate": current_rate,
            "batch_size": self.batch_size,
            "max_workers": self.max_workers,
        }
