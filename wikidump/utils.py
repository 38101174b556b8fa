# wikidump/utils.py

import bz2


def open_index(path):
    """
    Open the offset index for binary line iteration.
    Args:
        path: str, plain text index or a bzip2-compressed one (``.bz2`` suffix)
    Returns:
        a binary file object yielding raw lines
    """
    if str(path).endswith(".bz2"):
        return bz2.open(path, "rb")
    return open(path, "rb")


def human_bytes(n):
    """
    Format a byte count for progress lines, e.g. 1536 -> '1.5 KiB'.
    """
    size = float(n)
    for unit in ("B", "KiB", "MiB", "GiB"):
        if size < 1024 or unit == "GiB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
