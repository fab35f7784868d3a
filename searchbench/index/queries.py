"""Read benchmark queries from a line-delimited text file."""

import logging
from pathlib import Path

from ..errors import SetupError

logger = logging.getLogger(__name__)


def read_query_file(path: Path | str) -> list[str]:
    """Load every line of the query file, in order.

    Args:
        path: Text file with one query per line.

    Returns:
        List of query strings with line terminators stripped. Blank lines
        are kept as-is.
    """
    try:
        with open(path, encoding="utf-8") as f:
            queries = [line.rstrip("\r\n") for line in f]
    except (OSError, UnicodeDecodeError) as e:
        raise SetupError(f"Failed reading the query file:  {e}") from e
    logger.debug("Read %d queries from %s", len(queries), path)
    return queries
