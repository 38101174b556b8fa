# tests/test_blockio.py
import bz2

import pytest

from conftest import FOOTER, block_bytes
from wikidump.blockio import BlockReader
from wikidump.errors import BlockDecompressError

BLOCKS = [
    [(1, "A", "alpha"), (2, "B", "beta")],
    [(3, "C", "gamma")],
    [(4, "D", "delta"), (5, "E", "epsilon"), (6, "F", "zeta")],
]


def test_bounded_read_returns_exactly_one_block(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        for i, pages in enumerate(BLOCKS):
            raw = r.read_block(dump.offsets[i], dump.lengths[i])
            assert raw == block_bytes(pages)


def test_open_block_stops_at_end_of_its_stream(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        raw = r.read_block(dump.offsets[-1], None)
    assert raw == block_bytes(BLOCKS[-1])
    assert FOOTER not in raw


@pytest.mark.parametrize("chunk_size", [1, 7, 4096])
def test_small_read_chunks(make_dump, chunk_size):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path, chunk_size=chunk_size) as r:
        assert r.read_block(dump.offsets[1], dump.lengths[1]) == block_bytes(BLOCKS[1])
        assert r.read_block(dump.offsets[2], None) == block_bytes(BLOCKS[2])


def test_view_spanning_two_streams(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        raw = r.read_block(dump.offsets[0], dump.lengths[0] + dump.lengths[1])
    assert raw == block_bytes(BLOCKS[0]) + block_bytes(BLOCKS[1])


def test_bytes_read_counts_only_the_view(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        r.read_block(dump.offsets[1], dump.lengths[1])
        assert r.bytes_read == dump.lengths[1]


def test_truncated_view_fails(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        with pytest.raises(BlockDecompressError) as exc:
            r.read_block(dump.offsets[0], dump.lengths[0] - 10)
    assert exc.value.offset == dump.offsets[0]


def test_open_block_truncated_by_eof(tmp_path):
    data = bz2.compress(block_bytes(BLOCKS[0]))
    p = tmp_path / "cut.xml.bz2"
    p.write_bytes(data[:-12])
    with BlockReader(str(p)) as r:
        with pytest.raises(BlockDecompressError, match="truncated"):
            r.read_block(0, None)


def test_corrupt_block_fails(tmp_path):
    data = bytearray(bz2.compress(block_bytes(BLOCKS[2])))
    data[len(data) // 2] ^= 0xFF
    p = tmp_path / "bad.xml.bz2"
    p.write_bytes(bytes(data))
    with BlockReader(str(p)) as r:
        with pytest.raises(BlockDecompressError):
            r.read_block(0, len(data))


def test_offset_not_at_stream_start(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        with pytest.raises(BlockDecompressError, match="corrupt"):
            r.read_block(dump.offsets[1] + 3, dump.lengths[1] - 3)


def test_zero_length_rejected(make_dump):
    dump = make_dump(BLOCKS)
    with BlockReader(dump.dump_path) as r:
        with pytest.raises(BlockDecompressError):
            r.read_block(dump.offsets[0], 0)


def test_file_closed_on_error(make_dump):
    dump = make_dump(BLOCKS)
    with pytest.raises(BlockDecompressError):
        with BlockReader(dump.dump_path) as r:
            r.read_block(dump.offsets[0], dump.lengths[0] - 1)
    assert r.file.closed
