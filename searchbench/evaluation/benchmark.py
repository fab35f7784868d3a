"""Benchmark runner replaying a query list against a search handle."""

import logging
import sys
from dataclasses import asdict, dataclass
from typing import TextIO

from tqdm import tqdm

from ..errors import QueryError
from ..index.searcher import SearchHandle
from ..utils.timer import TimingTree
from .metrics import latency_stats

logger = logging.getLogger(__name__)

RESULT_LIMIT = 10

SEARCH_HEADER = "query\tnum_terms\tnum hits\ttime in microsecs"
FETCH_HEADER = "query\ttime in microsecs"


@dataclass
class QueryTiming:
    """One printed result row."""

    phase: str
    repetition: int
    query: str
    elapsed_us: int
    num_hits: int | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class BenchmarkRunner:
    """Runs the search pass and the fetch pass over a fixed query list.

    Each pass replays the full query list ``num_repeat`` times and prints one
    tab-separated row per (repetition, query), repetitions outermost. The
    first failing query aborts the pass with a QueryError.

    Args:
        handle: Search capability for the index under test.
        queries: Query texts, replayed in list order.
        num_repeat: Number of full passes over ``queries``.
        out: Stream receiving the result rows.
        progress: Show a tqdm bar over repetitions on stderr.
    """

    def __init__(
        self,
        handle: SearchHandle,
        queries: list[str],
        num_repeat: int,
        out: TextIO | None = None,
        progress: bool = False,
    ):
        if num_repeat < 0:
            raise ValueError(f"num_repeat must be non-negative, got {num_repeat}")
        self.handle = handle
        self.queries = queries
        self.num_repeat = num_repeat
        self.out = out if out is not None else sys.stdout
        self.progress = progress

    def _print(self, line: str = "") -> None:
        print(line, file=self.out, flush=True)

    def _repetitions(self, desc: str):
        return tqdm(
            range(self.num_repeat), desc=desc, file=sys.stderr, disable=not self.progress
        )

    def _parse(self, query_txt: str):
        try:
            return self.handle.parse(query_txt)
        except Exception as e:
            raise QueryError("parsing", query_txt, e) from e

    def run_search_pass(self) -> list[QueryTiming]:
        """Time ranking plus exact counting for every query."""
        self._print("SEARCH\n")
        # num_terms is never filled in; the header is kept as published.
        self._print(SEARCH_HEADER)
        results = []
        for rep in self._repetitions("search"):
            for query_txt in self.queries:
                query = self._parse(query_txt)
                timing = TimingTree()
                try:
                    with timing.open("search"):
                        found = self.handle.search(query, RESULT_LIMIT, count=True)
                except Exception as e:
                    raise QueryError("searching", query_txt, e) from e
                elapsed_us = timing.total_time()
                self._print(f"{query_txt}\t{found.count}\t{elapsed_us}")
                results.append(
                    QueryTiming("search", rep, query_txt, elapsed_us, num_hits=found.count)
                )
        logger.debug("Search pass finished: %d rows", len(results))
        return results

    def run_fetch_pass(self) -> list[QueryTiming]:
        """Time loading the stored documents of the top hits, excluding ranking."""
        self._print("\n\nFETCH STORE\n")
        self._print(FETCH_HEADER)
        results = []
        for rep in self._repetitions("fetch"):
            for query_txt in self.queries:
                query = self._parse(query_txt)
                try:
                    found = self.handle.search(query, RESULT_LIMIT, count=False)
                except Exception as e:
                    raise QueryError("searching", query_txt, e) from e
                timing = TimingTree()
                try:
                    with timing.open("total"):
                        for hit in found.hits[:RESULT_LIMIT]:
                            self.handle.materialize(hit)
                except Exception as e:
                    raise QueryError("retrieving document for", query_txt, e) from e
                elapsed_us = timing.total_time()
                self._print(f"{query_txt}\t{elapsed_us}")
                results.append(QueryTiming("fetch", rep, query_txt, elapsed_us))
        logger.debug("Fetch pass finished: %d rows", len(results))
        return results

    def run(self) -> list[QueryTiming]:
        """Run the search pass, then the fetch pass."""
        results = self.run_search_pass()
        results.extend(self.run_fetch_pass())
        return results


def summarize(results: list[QueryTiming]) -> list[dict]:
    """Per (phase, query) latency statistics, in first-seen order."""
    groups: dict[tuple[str, str], list[int]] = {}
    for r in results:
        groups.setdefault((r.phase, r.query), []).append(r.elapsed_us)
    return [
        {"phase": phase, "query": query, **latency_stats(elapsed)}
        for (phase, query), elapsed in groups.items()
    ]


def format_summary(rows: list[dict]) -> list[str]:
    """Render summarize() output as tab-separated lines with a header."""
    lines = ["phase\tquery\tmean_us\tp50_us\tp95_us\tqps"]
    for row in rows:
        lines.append(
            f"{row['phase']}\t{row['query']}\t{row['mean_us']:.1f}\t"
            f"{row['p50_us']:.1f}\t{row['p95_us']:.1f}\t{row['qps']:.1f}"
        )
    return lines
