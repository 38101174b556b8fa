# wikidump/profkit.py: ultra-light profiling counters for the extraction pipeline
# Toggle via env var: set WIKIDUMP_PROF=1 to enable; otherwise it's no-op with near-zero overhead.

import os
import sys
import time
from collections import defaultdict
from contextlib import contextmanager

ENABLED = os.getenv("WIKIDUMP_PROF", "0") == "1"
COUNTERS = defaultdict(float)  # str -> float (counts / milliseconds / bytes etc.)
NOTES = []  # caveats printed after the counters (e.g. counters a pool run can't see)

def tick(name: str, n: float = 1.0):
    if ENABLED:
        COUNTERS[name] += n

def note(msg: str):
    if ENABLED and msg not in NOTES:
        NOTES.append(msg)

@contextmanager
def timeit(name: str):
    if not ENABLED:
        yield
        return
    t0 = time.perf_counter()
    try:
        yield
    finally:
        COUNTERS[name] += (time.perf_counter() - t0) * 1000.0  # ms

def report(stream=None):
    """Print every counter, sorted by name, then any notes. Does nothing when disabled."""
    if not ENABLED:
        return
    stream = stream or sys.stderr
    for name in sorted(COUNTERS):
        print(f"[prof] {name:<24} {COUNTERS[name]:,.1f}", file=stream)
    for msg in NOTES:
        print(f"[prof] note: {msg}", file=stream)

def reset():
    COUNTERS.clear()
    NOTES.clear()
