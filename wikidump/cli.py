#!/usr/bin/env python3
"""
Extract Japanese railway stations from a Wikipedia multistream dump.

Pipeline:
  1) scan the offset index, keep titles starting with --prefix   (indexer)
  2) decompress + decode only the blocks holding those pages     (fetcher)
  3) pull station rows out of the page text, strip disambiguation
     suffixes, sort + dedupe                                      (stations)
  4) write TSV to stdout (or --output)

How to use:
python -m wikidump.cli -d data/enwiki-...-multistream.xml.bz2 -i data/enwiki-...-multistream-index.txt.bz2 > stations.tsv
python -m wikidump.cli --workers 4 --quiet -o stations.tsv

Set WIKIDUMP_PROF=1 to print timing/byte counters at the end.
"""

import argparse
import os
import sys

from wikidump import profkit
from wikidump.errors import ExtractError
from wikidump.fetcher import extract_pages
from wikidump.indexer import extract_index, title_prefix
from wikidump.paths import DUMP_PATH, INDEX_PATH, LIST_PAGE_PREFIX
from wikidump.stations import extract_stations, remove_disambiguations, uniquify, write_tsv


def collect_stations(dump_path, index_path, *, prefix=LIST_PAGE_PREFIX, workers=1, verbose=True):
    """
    Run index scan + block fetch + extraction. Returns the sorted, deduplicated
    stations. Nothing is written until this has fully succeeded.
    """
    directory = extract_index(index_path, title_prefix(prefix), verbose=verbose)
    pages = extract_pages(dump_path, directory, workers=workers, verbose=verbose)
    stations = uniquify(remove_disambiguations(extract_stations(pages)))
    if verbose:
        print(f"[cli] pages={len(pages):,}  stations={len(stations):,}", file=sys.stderr)
    return stations


def main(argv=None):
    ap = argparse.ArgumentParser(description="Extract Japanese railway stations from a Wikipedia multistream dump.")
    ap.add_argument("-d", "--dump", default=DUMP_PATH, help="Multistream dump (.xml.bz2)")
    ap.add_argument("-i", "--index", default=INDEX_PATH, help="Multistream index (.txt or .txt.bz2)")
    ap.add_argument("--prefix", default=LIST_PAGE_PREFIX, help="Title prefix of the pages to read")
    ap.add_argument("-o", "--output", default=None, help="Output TSV path; default: stdout")
    ap.add_argument("--workers", type=int, default=1, help="#processes for block decoding; default: 1")
    ap.add_argument("--quiet", action="store_true", help="No progress output on stderr.")
    args = ap.parse_args(argv)

    verbose = not args.quiet
    try:
        stations = collect_stations(args.dump, args.index, prefix=args.prefix,
                                    workers=args.workers, verbose=verbose)
        if args.output:
            out_dir = os.path.dirname(args.output)
            if out_dir:
                os.makedirs(out_dir, exist_ok=True)
            with open(args.output, "w", encoding="utf-8", newline="") as out:
                write_tsv(out, stations)
        else:
            write_tsv(sys.stdout, stations)
    except (ExtractError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    finally:
        profkit.report()
    return 0


if __name__ == "__main__":
    sys.exit(main())
