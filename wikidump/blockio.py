"""
wikidump/blockio.py

Reads single blocks out of a multistream bz2 dump.

A multistream dump is a concatenation of independent bz2 streams, each
holding ~100 <page> fragments. Given a block's offset (and its compressed
length from the index directory) one block can be decompressed without
touching anything else in the file.

    [stream @0: <mediawiki><siteinfo>..][stream @597: <page>..<page>][stream @653281: ...]...
                                         ^ read_block(597, 652684)
"""

import bz2
from typing import List, Optional

from wikidump.errors import BlockDecompressError
from wikidump.paths import READ_CHUNK_SIZE


class BlockReader:
    """
    Random-access reader over a multistream bz2 archive.

    read_block(offset, length):
        length is an int  -> decompress exactly the bytes [offset, offset+length)
                             (one or more complete bz2 streams)
        length is None    -> decompress the one bz2 stream starting at offset,
                             reading as far as it goes
    """
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __init__(self, filepath, chunk_size: int = READ_CHUNK_SIZE):
        self.filepath = filepath
        self.chunk_size = chunk_size
        self.file = open(filepath, "rb")
        self.bytes_read = 0  # compressed bytes consumed so far

    def read_block(self, offset: int, length: Optional[int]) -> bytes:
        if length is not None and length <= 0:
            raise BlockDecompressError(offset, f"invalid block length {length}")

        self.file.seek(offset)
        remaining = length
        decomp = bz2.BZ2Decompressor()
        out: List[bytes] = []
        pending = b""  # bytes past the end of a finished stream, still inside the view

        while True:
            if pending:
                data, pending = pending, b""
            else:
                n = self.chunk_size if remaining is None else min(self.chunk_size, remaining)
                data = self.file.read(n) if n > 0 else b""
                if remaining is not None:
                    remaining -= len(data)
                self.bytes_read += len(data)

            if not data:
                if decomp.eof:
                    break
                raise BlockDecompressError(offset, "truncated: data ended inside a bz2 stream")

            try:
                out.append(decomp.decompress(data))
            except (OSError, ValueError) as e:
                raise BlockDecompressError(offset, f"corrupt bz2 data ({e})") from e

            if decomp.eof:
                if length is None:
                    # open block: its own stream is all we want
                    break
                pending = decomp.unused_data
                if not pending and remaining == 0:
                    break
                # another stream follows inside the view
                decomp = bz2.BZ2Decompressor()

        return b"".join(out)

    def close(self):
        self.file.close()
