"""Timing context managers for benchmarking."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class TimingResult:
    """Stores elapsed time from a timing context."""

    elapsed: float = 0.0


@contextmanager
def timer():
    """Context manager that measures wall-clock time in seconds.

    Usage:
        with timer() as t:
            do_something()
        print(f"Took {t.elapsed:.3f}s")
    """
    result = TimingResult()
    start = time.perf_counter()
    try:
        yield result
    finally:
        result.elapsed = time.perf_counter() - start


@dataclass
class TimingSpan:
    """A named interval. Children are arena indices in the owning tree."""

    name: str
    start: float
    elapsed: float | None = None
    children: list[int] = field(default_factory=list)

    @property
    def closed(self) -> bool:
        return self.elapsed is not None

    @property
    def duration_us(self) -> int | None:
        if self.elapsed is None:
            return None
        return int(self.elapsed * 1_000_000)


class ScopedSpan:
    """Handle returned by TimingTree.open().

    Closing records the span's elapsed time. It happens once, either through
    close() or when the ``with`` block is left, whichever comes first.
    """

    def __init__(self, tree: "TimingTree", index: int):
        self._tree = tree
        self._index = index
        self._closed = False

    @property
    def span(self) -> TimingSpan:
        return self._tree._spans[self._index]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._tree._close(self._index)

    def __enter__(self) -> "ScopedSpan":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class TimingTree:
    """Tree of nested timing spans for one unit of measured work.

    Spans opened while another span is open become its children; spans opened
    with nothing open are top-level. A parent's duration is measured directly,
    so it includes whatever ran between its instrumented children.

    Usage:
        timing = TimingTree()
        with timing.open("search"):
            with timing.open("parse"):
                ...
            with timing.open("collect"):
                ...
        print(timing.total_time())
    """

    def __init__(self):
        self._spans: list[TimingSpan] = []
        self._roots: list[int] = []
        self._active: list[int] = []

    def open(self, name: str) -> ScopedSpan:
        """Start a span under the innermost open span and return its handle."""
        if not name:
            raise ValueError("Span name must be non-empty")
        index = len(self._spans)
        if self._active:
            self._spans[self._active[-1]].children.append(index)
        else:
            self._roots.append(index)
        self._active.append(index)
        self._spans.append(TimingSpan(name=name, start=time.perf_counter()))
        return ScopedSpan(self, index)

    def _close(self, index: int) -> None:
        span = self._spans[index]
        span.elapsed = time.perf_counter() - span.start
        # Closing order is up to the caller, so the span may not be on top.
        self._active.remove(index)

    def total_time(self) -> int:
        """Elapsed microseconds of the closed top-level span(s)."""
        return sum(
            self._spans[i].duration_us
            for i in self._roots
            if self._spans[i].closed
        )

    @property
    def roots(self) -> list[TimingSpan]:
        return [self._spans[i] for i in self._roots]

    def children(self, span: TimingSpan) -> list[TimingSpan]:
        return [self._spans[i] for i in span.children]

    def spans(self) -> Iterator[TimingSpan]:
        """Iterate over every span in the order they were opened."""
        return iter(self._spans)

    def to_dict(self) -> list[dict]:
        """Nested representation of the tree, suitable for json.dump()."""
        return [self._span_dict(i) for i in self._roots]

    def _span_dict(self, index: int) -> dict:
        span = self._spans[index]
        return {
            "name": span.name,
            "duration_us": span.duration_us,
            "children": [self._span_dict(i) for i in span.children],
        }
