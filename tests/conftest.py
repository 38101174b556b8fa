# tests/conftest.py
"""
Builds tiny multistream dumps the same shape as the real ones:

    stream 0      : <mediawiki ...><siteinfo>...</siteinfo>
    stream 1..N   : one block each, a run of <page> fragments
    last stream   : </mediawiki>

plus the matching `offset:id:title` index (plain or .bz2).
"""

import bz2
from xml.sax.saxutils import escape

import pytest

HEADER = (b'<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/" xml:lang="en">\n'
          b"  <siteinfo>\n    <sitename>Wikipedia</sitename>\n  </siteinfo>\n")
FOOTER = b"</mediawiki>\n"


def page_xml(page_id, title, body=""):
    # revision id deliberately differs from the page id
    return (
        "  <page>\n"
        f"    <title>{escape(title)}</title>\n"
        "    <ns>0</ns>\n"
        f"    <id>{page_id}</id>\n"
        "    <revision>\n"
        f"      <id>{page_id * 1000 + 7}</id>\n"
        f'      <text bytes="{len(body)}" xml:space="preserve">{escape(body)}</text>\n'
        "    </revision>\n"
        "  </page>\n"
    ).encode("utf-8")


def block_bytes(pages):
    return b"".join(page_xml(*p) for p in pages)


class Dump:
    def __init__(self, dump_path, index_path, offsets, lengths, index_lines):
        self.dump_path = str(dump_path)
        self.index_path = str(index_path)
        self.offsets = offsets          # block i -> compressed offset
        self.lengths = lengths          # block i -> compressed length
        self.index_lines = index_lines  # raw index lines (bytes, with newline)


@pytest.fixture
def make_dump(tmp_path):
    """
    make_dump([[(id, title, body), ...], ...], compress_index=False) -> Dump
    Each inner list is one block.
    """
    def _make(blocks, compress_index=False, name="wiki"):
        streams = [bz2.compress(HEADER)]
        offsets, lengths, lines = [], [], []
        pos = len(streams[0])
        for pages in blocks:
            data = bz2.compress(block_bytes(pages))
            offsets.append(pos)
            lengths.append(len(data))
            for page_id, title, *_ in pages:
                lines.append(f"{pos}:{page_id}:{title}\n".encode("utf-8"))
            streams.append(data)
            pos += len(data)
        streams.append(bz2.compress(FOOTER))

        dump_path = tmp_path / f"{name}-multistream.xml.bz2"
        dump_path.write_bytes(b"".join(streams))

        if compress_index:
            index_path = tmp_path / f"{name}-multistream-index.txt.bz2"
            index_path.write_bytes(bz2.compress(b"".join(lines)))
        else:
            index_path = tmp_path / f"{name}-multistream-index.txt"
            index_path.write_bytes(b"".join(lines))
        return Dump(dump_path, index_path, offsets, lengths, lines)

    return _make
