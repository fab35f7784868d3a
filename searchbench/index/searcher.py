"""Search capability used by the benchmark, and its tantivy implementation."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tantivy

from ..errors import SetupError
from ..evaluation.metrics import memory_usage_bytes
from ..utils.timer import timer

logger = logging.getLogger(__name__)

META_FILENAME = "meta.json"


@dataclass
class SearchHits:
    """Ranked hits of one search, plus the total match count if requested."""

    hits: list[Any] = field(default_factory=list)
    count: int | None = None


class SearchHandle(ABC):
    """Abstract interface to a searchable index.

    All handles support:
      - parse(): Turn query text into an executable query
      - search(): Rank the top hits and optionally count all matches
      - materialize(): Load the stored document behind one hit
    """

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse query text against the index's default search fields.

        Raises whatever the underlying engine raises for malformed queries.
        """
        ...

    @abstractmethod
    def search(self, query: Any, limit: int, count: bool = False) -> SearchHits:
        """Run a ranked search.

        Args:
            query: A query returned by parse().
            limit: Maximum number of hits to return.
            count: Whether to also compute the exact number of matches.
        """
        ...

    @abstractmethod
    def materialize(self, hit: Any) -> Any:
        """Return the stored document for a hit from search()."""
        ...


def read_schema_fields(index_path: Path | str) -> list[dict]:
    """Return the field entries of an index's schema, as stored in meta.json."""
    meta_path = Path(index_path) / META_FILENAME
    try:
        with open(meta_path, encoding="utf-8") as f:
            meta = json.load(f)
    except (OSError, ValueError) as e:
        raise SetupError(f"Failed to read index schema from {meta_path}.\n{e}") from e
    return meta.get("schema", [])


def is_indexed(field_entry: dict) -> bool:
    """Whether a schema field entry can be searched."""
    if field_entry.get("type") == "facet":
        return True
    options = field_entry.get("options") or {}
    return bool(options.get("indexing") or options.get("indexed"))


def extract_search_fields(schema_fields: list[dict]) -> list[str]:
    """Names of the indexed fields, in schema order."""
    return [entry["name"] for entry in schema_fields if is_indexed(entry)]


def open_index(index_path: Path | str) -> tantivy.Index:
    """Open an existing tantivy index directory."""
    index_path = Path(index_path)
    if not index_path.is_dir():
        raise SetupError(f"Failed to open index.\nNo such directory: {index_path}")
    with timer() as t_open:
        try:
            index = tantivy.Index.open(str(index_path))
        except Exception as e:
            raise SetupError(f"Failed to open index.\n{e}") from e
    logger.info(
        "Opened index %s in %.3fs (rss=%.1fMB)",
        index_path, t_open.elapsed, memory_usage_bytes() / 1024 / 1024,
    )
    return index


class TantivySearchHandle(SearchHandle):
    """Search handle over an opened tantivy index.

    Queries are parsed against every indexed field of the schema.
    """

    def __init__(self, index: tantivy.Index, search_fields: list[str]):
        self.index = index
        self.search_fields = search_fields
        self.searcher = index.searcher()

    @classmethod
    def from_path(cls, index_path: Path | str) -> "TantivySearchHandle":
        index = open_index(index_path)
        search_fields = extract_search_fields(read_schema_fields(index_path))
        logger.info("Default search fields: %s", ", ".join(search_fields))
        return cls(index, search_fields)

    def parse(self, text: str) -> Any:
        return self.index.parse_query(text, self.search_fields)

    def search(self, query: Any, limit: int, count: bool = False) -> SearchHits:
        result = self.searcher.search(query, limit, count=count)
        return SearchHits(hits=list(result.hits), count=result.count)

    def materialize(self, hit: tuple) -> tantivy.Document:
        _score, doc_address = hit
        return self.searcher.doc(doc_address)
