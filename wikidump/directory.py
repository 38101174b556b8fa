"""
wikidump/directory.py

The index directory maps each compressed block of the multistream dump to
the matching pages it holds and to its compressed length.

Layout:
    entries_by_block = {
        block_offset: [IndexEntry, ...],   # index order
        ...
    }
    block_length = {
        block_offset: int | None,          # None = open, runs to the end of its bz2 stream
        ...
    }
    entry_by_id / entry_by_title           # the same IndexEntry objects, keyed differently

Built once by wikidump.indexer.IndexBuilder, read-only afterwards. It is small (only the
selected pages), so it is passed by reference to every block worker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class IndexEntry:
    id: int
    title: str
    block_offset: int


@dataclass
class IndexDirectory:
    """
    Per-block view of the selected index entries.

    Typical usage:
        directory = IndexBuilder(title_prefix("List of ")).build(lines)
        for offset, length, entries in directory.blocks():
            ...
        entry = directory.lookup_title("List of foo")
    """
    entries_by_block: Dict[int, List[IndexEntry]] = field(default_factory=dict)
    block_length: Dict[int, Optional[int]] = field(default_factory=dict)
    entry_by_id: Dict[int, IndexEntry] = field(default_factory=dict)
    entry_by_title: Dict[str, IndexEntry] = field(default_factory=dict)

    def add(self, entry: IndexEntry):
        self.entries_by_block.setdefault(entry.block_offset, []).append(entry)
        self.entry_by_id[entry.id] = entry
        self.entry_by_title[entry.title] = entry

    def lookup_id(self, page_id: int) -> Optional[IndexEntry]:
        return self.entry_by_id.get(page_id)

    def lookup_title(self, title: str) -> Optional[IndexEntry]:
        return self.entry_by_title.get(title)

    def blocks(self) -> Iterator[Tuple[int, Optional[int], List[IndexEntry]]]:
        """
        Yield (block_offset, block_length, entries) for every block holding at
        least one selected entry. Callers must not rely on the order.
        """
        for offset, entries in self.entries_by_block.items():
            yield offset, self.block_length[offset], entries

    @property
    def num_blocks(self) -> int:
        return len(self.entries_by_block)

    def __len__(self):
        return len(self.entry_by_id)

    def __repr__(self):
        open_blocks = sum(1 for n in self.block_length.values() if n is None)
        return f"IndexDirectory(entries={len(self)}, blocks={self.num_blocks}, open={open_blocks})"
