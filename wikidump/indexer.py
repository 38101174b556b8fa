"""
wikidump/indexer.py

Builds an IndexDirectory from the multistream offset index in a single pass.

Each index line is `offset:id:title`, where `offset` is the byte position of
the bz2 stream (block) holding the page in the compressed dump. Lines sharing
an offset belong to the same block and offsets never go backwards, so a block's
compressed length is the distance to the next strictly greater offset:

    597:10:AccessibleComputing        <- block @597 ...
    597:12:Anarchism
    653281:1050:List of ...           <- ... ends here, length = 653281 - 597

The index does not store lengths, so they are inferred while scanning. Only
blocks with at least one selected title are tracked; the last tracked block
has no successor and stays open (length None).
"""

import sys
from typing import Callable, Iterable, Optional

from wikidump.directory import IndexDirectory, IndexEntry
from wikidump.errors import IndexFormatError
from wikidump.utils import open_index


def title_prefix(prefix: str) -> Callable[[bytes], bool]:
    """Predicate: raw title bytes start with `prefix`."""
    raw = prefix.encode("utf-8")
    return lambda title: title.startswith(raw)


def title_in(titles: Iterable[str]) -> Callable[[bytes], bool]:
    """Predicate: raw title bytes equal one of `titles`."""
    wanted = {t.encode("utf-8") for t in titles}
    return lambda title: title in wanted


class IndexBuilder:
    """
    Single-pass scanner over index lines.

    The only state carried between lines is `open_offset`: the offset of the
    block currently collecting selected entries, or None when no block is open.
    A block is closed by the first line whose offset is strictly greater.

    Every line is validated (field count, numeric offset, non-decreasing
    offsets) whether or not its title is selected; any malformed line fails
    the whole build.
    """

    def __init__(self, should_index: Callable[[bytes], bool], delimiter: bytes = b":",
                 progress_every: int = 5_000_000, verbose: bool = False):
        self.should_index = should_index
        self.delimiter = delimiter
        self.progress_every = progress_every
        self.verbose = verbose

    def build(self, lines: Iterable[bytes]) -> IndexDirectory:
        directory = IndexDirectory()
        open_offset: Optional[int] = None
        last_offset = -1
        scanned = 0

        for lineno, raw in enumerate(lines, start=1):
            line = raw.rstrip(b"\r\n")
            if not line:
                continue
            scanned += 1

            fields = line.split(self.delimiter, 2)
            if len(fields) != 3:
                raise IndexFormatError(lineno, line, f"expected 3 fields, got {len(fields)}")
            offset_b, id_b, title_b = fields

            offset = _parse_int(offset_b, lineno, line, "offset")
            if offset < last_offset:
                raise IndexFormatError(lineno, line, f"offset {offset} goes back from {last_offset}")
            last_offset = offset

            if open_offset is not None and offset > open_offset:
                directory.block_length[open_offset] = offset - open_offset
                open_offset = None

            if self.should_index(title_b):
                page_id = _parse_int(id_b, lineno, line, "id")
                try:
                    title = title_b.decode("utf-8")
                except UnicodeDecodeError:
                    raise IndexFormatError(lineno, line, "title is not valid UTF-8") from None
                if page_id in directory.entry_by_id:
                    raise IndexFormatError(lineno, line, f"duplicate id {page_id}")
                if title in directory.entry_by_title:
                    raise IndexFormatError(lineno, line, f"duplicate title {title!r}")

                directory.add(IndexEntry(id=page_id, title=title, block_offset=offset))

                if open_offset is None:
                    # first selected page of this block; length unknown until the next offset
                    directory.block_length[offset] = None
                    open_offset = offset

            if self.verbose and self.progress_every and scanned % self.progress_every == 0:
                print(f"[indexer] scanned={scanned:,}  selected={len(directory):,}  "
                      f"blocks={directory.num_blocks:,}", file=sys.stderr)

        for offset in directory.entries_by_block:
            assert offset in directory.block_length, f"block @ {offset} has no length"

        if self.verbose:
            print(f"[indexer] done | lines={scanned:,}  selected={len(directory):,}  "
                  f"blocks={directory.num_blocks:,}", file=sys.stderr)
        return directory


def _parse_int(value: bytes, lineno: int, line: bytes, what: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise IndexFormatError(lineno, line, f"{what} is not an integer") from None
    if n < 0:
        raise IndexFormatError(lineno, line, f"{what} is negative")
    return n


def extract_index(index_path: str, should_index: Callable[[bytes], bool],
                  verbose: bool = True) -> IndexDirectory:
    """
    Scan the index file at `index_path` (plain or .bz2) and return the
    directory of blocks holding titles accepted by `should_index`.
    """
    if verbose:
        print(f"[indexer] scanning {index_path}", file=sys.stderr)
    builder = IndexBuilder(should_index, verbose=verbose)
    with open_index(index_path) as f:
        return builder.build(f)
