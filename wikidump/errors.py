# wikidump/errors.py
"""
Exceptions raised while building the index or decoding blocks.

Every one of them is fatal to a run: nothing here is retried or recovered,
the CLI reports the message and exits non-zero.

Block errors are raised inside pool workers and re-raised in the parent, so
each class pickles with its own constructor arguments (__reduce__).
"""


class ExtractError(Exception):
    """Base class for all extraction failures."""


class IndexFormatError(ExtractError, ValueError):
    """A line of the offset index could not be parsed."""

    def __init__(self, lineno: int, line: bytes, reason: str):
        self.lineno = lineno
        self.line = line
        self.reason = reason
        shown = line[:120].decode("utf-8", errors="replace")
        super().__init__(f"index line {lineno}: {reason}: {shown!r}")

    def __reduce__(self):
        return type(self), (self.lineno, self.line, self.reason)


class BlockDecompressError(ExtractError):
    """A compressed block is corrupt or ends before its stream does."""

    def __init__(self, offset: int, reason: str):
        self.offset = offset
        self.reason = reason
        super().__init__(f"block @ {offset}: {reason}")

    def __reduce__(self):
        return type(self), (self.offset, self.reason)


class DocumentDecodeError(ExtractError):
    """The decompressed pages of a block are not well-formed."""

    def __init__(self, reason: str, offset: int | None = None):
        self.offset = offset
        self.reason = reason
        where = f"block @ {offset}: " if offset is not None else ""
        super().__init__(f"{where}{reason}")

    def __reduce__(self):
        return type(self), (self.reason, self.offset)
