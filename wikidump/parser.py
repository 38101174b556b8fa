"""
wikidump/parser.py

Turns one decompressed block into Documents.

A block is a run of sibling <page> elements with no enclosing root:

    <page><title>A</title><id>1</id><revision>..<text>...</text></revision></page>
    <page><title>B</title><id>2</id>...</page>

which is not a well-formed XML document on its own. Decoding therefore
happens in two explicit steps:
    1) wrap_fragments(raw)  -> b"<block>" + raw + b"</block>"
    2) parse the wrapper and read each top-level <page>
"""

from dataclasses import dataclass
from typing import List
import xml.etree.ElementTree as ET

from wikidump.errors import DocumentDecodeError

WRAPPER_OPEN = b"<block>"
WRAPPER_CLOSE = b"</block>"


@dataclass(frozen=True)
class Document:
    id: int
    title: str
    body: str


def wrap_fragments(raw: bytes) -> bytes:
    """Give the concatenated page fragments a single synthetic root."""
    return WRAPPER_OPEN + raw + WRAPPER_CLOSE


def parse_page(page: ET.Element) -> Document:
    """
    Read one <page> element.
    - id:    the page's own <id> (not revision/id)
    - title: <title>, empty if missing
    - body:  revision/text, empty if missing or self-closed
    """
    id_text = page.findtext("id")
    if id_text is None:
        raise DocumentDecodeError("page without <id>")
    try:
        page_id = int(id_text.strip())
    except ValueError:
        raise DocumentDecodeError(f"page id is not an integer: {id_text!r}") from None
    return Document(
        id=page_id,
        title=page.findtext("title") or "",
        body=page.findtext("revision/text") or "",
    )


def decode_block(raw: bytes) -> List[Document]:
    """
    Decode a decompressed block into its pages, in block order.
    Raises DocumentDecodeError if the fragments are not well-formed.
    """
    try:
        root = ET.fromstring(wrap_fragments(raw))
    except ET.ParseError as e:
        raise DocumentDecodeError(f"malformed page container ({e})") from e
    return [parse_page(page) for page in root.findall("page")]
