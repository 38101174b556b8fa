# wikidump/fetcher.py
"""
Fetch the selected pages out of a multistream dump.

Design:
- The IndexDirectory lists every block that holds at least one selected page.
  Each block is one independent task:
    worker(archive_path, offset, length, entries) -> [Document, ...]
  where the worker
    BlockReader.read_block() -> decode_block() -> match_records()
- Blocks not in the directory are never read.
- Tasks share nothing but read-only inputs; each opens and closes its own
  file handle, so they can run on a process pool (bz2 + XML parsing are
  CPU-bound, processes sidestep the GIL).
- The first failing block aborts the run: pending tasks are cancelled, the
  pool is not waited on, and the error is raised. There is no partial result.

Output order follows task completion and is not meaningful; callers sort.
"""

from __future__ import annotations

import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Sequence

from wikidump.blockio import BlockReader
from wikidump.directory import IndexDirectory, IndexEntry
from wikidump.errors import DocumentDecodeError
from wikidump.parser import Document, decode_block
from wikidump.profkit import note, tick, timeit
from wikidump.utils import human_bytes


def match_records(documents: Iterable[Document], entries: Sequence[IndexEntry]) -> List[Document]:
    """
    Pick, for each expected entry (in entry order), the decoded page with the
    same id. Entries whose page is absent from the block yield nothing.
    """
    by_id: Dict[int, Document] = {}
    for doc in documents:
        by_id.setdefault(doc.id, doc)  # first occurrence wins
    return [by_id[e.id] for e in entries if e.id in by_id]


def fetch_block(archive_path: str, offset: int, length: Optional[int],
                entries: Sequence[IndexEntry]) -> List[Document]:
    """
    Worker: decompress one block, decode its pages, keep the expected ones.
    """
    with BlockReader(archive_path) as reader:
        with timeit("decompress_ms"):
            raw = reader.read_block(offset, length)
        tick("compressed_bytes", reader.bytes_read)
    tick("decompressed_bytes", len(raw))

    with timeit("decode_ms"):
        try:
            documents = decode_block(raw)
        except DocumentDecodeError as e:
            raise DocumentDecodeError(e.reason, offset=offset) from e
    tick("pages_decoded", len(documents))
    return match_records(documents, entries)


def extract_pages(archive_path: str, directory: IndexDirectory, *,
                  workers: int = 1, verbose: bool = True) -> List[Document]:
    """
    Decompress and decode every block in `directory`, returning the selected
    pages. With workers <= 1 (or a single block) everything runs in-process.
    """
    tasks = list(directory.blocks())
    if verbose:
        print(f"[fetch] blocks={len(tasks):,}  selected={len(directory):,}  workers={workers}",
              file=sys.stderr)

    pages: List[Document] = []
    if not tasks:
        return pages

    if workers <= 1 or len(tasks) == 1:
        for i, (offset, length, entries) in enumerate(tasks, start=1):
            found = fetch_block(archive_path, offset, length, entries)
            tick("blocks")
            pages.extend(found)
            if verbose:
                _report(i, len(tasks), offset, length, entries, found)
        return pages

    # per-worker counters (bytes, decompress/decode time) stay in the child processes
    note("decompress/decode counters not collected from pool workers (workers > 1)")

    ex = ProcessPoolExecutor(max_workers=workers)
    try:
        futures = {
            ex.submit(fetch_block, archive_path, offset, length, entries): (offset, length, entries)
            for offset, length, entries in tasks
        }
        for i, fut in enumerate(as_completed(futures), start=1):
            offset, length, entries = futures[fut]
            found = fut.result()  # re-raises the worker's exception
            tick("blocks")
            pages.extend(found)
            if verbose:
                _report(i, len(tasks), offset, length, entries, found)
    except BaseException:
        # fail fast: drop pending blocks, don't wait for running ones
        ex.shutdown(wait=False, cancel_futures=True)
        raise
    ex.shutdown(wait=True)
    return pages


def _report(i, total, offset, length, entries, found):
    size = "open" if length is None else human_bytes(length)
    print(f"[fetch]   block {i}/{total} @ {offset} ({size}) | expected={len(entries)}  found={len(found)}",
          file=sys.stderr)
