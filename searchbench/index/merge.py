"""Merge index segments and garbage-collect files no longer referenced."""

import logging
from pathlib import Path

import tantivy

from ..errors import MergeError
from ..utils.timer import timer
from .searcher import open_index

logger = logging.getLogger(__name__)

MERGE_HEAP_SIZE = 300_000_000
GC_HEAP_SIZE = 40_000_000


def _num_segments(index: tantivy.Index) -> int:
    index.reload()
    return index.searcher().num_segments


def run_merge(index_path: Path | str) -> tuple[int, int]:
    """Merge the segments of an index, then garbage-collect stale files.

    The python bindings do not expose an explicit merge of chosen segments,
    so a commit is issued to let the writer's merge policy run over the
    current segments, and the merging threads are waited on.

    Returns:
        (segments before, segments after)
    """
    index = open_index(index_path)
    try:
        before = _num_segments(index)
        with timer() as t_merge:
            writer = index.writer(MERGE_HEAP_SIZE)
            writer.commit()
            writer.wait_merging_threads()
        after = _num_segments(index)
        message = f"Merge finished in {t_merge.elapsed:.3f}s: {before} segments -> {after} segments"
        if after == before and before > 1:
            logger.warning("Merge policy left the %d segments of %s unmerged", before, index_path)
            message += " (merge policy left the segments unmerged)"
        print(message)

        print("Garbage collect irrelevant segments.")
        gc_writer = index.writer(GC_HEAP_SIZE, 1)
        gc_writer.garbage_collect_files()
        gc_writer.wait_merging_threads()
    except Exception as e:
        raise MergeError(f"Merge failed : {e}") from e
    logger.debug("Merged %s", index_path)
    return before, after
