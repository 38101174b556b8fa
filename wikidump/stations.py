"""
wikidump/stations.py

Station rows out of the "List of railway stations in Japan: ..." pages.

The lists are wikitables whose rows start like

    |[[Tōkyō Station|Tōkyō]] ||[[:ja:東京駅|東京駅]]（とうきょう）|| ...

i.e. English link, then a ja-interwiki link followed by the kana reading in
parentheses (full-width or ASCII). Each such row becomes
Station(name="東京駅", name_kana="とうきょう", name_en="Tōkyō").

What it does after extraction:
- cleans fields of html entities and mojibake only (ftfy with width,
  quote and normalization fixes off); names keep their own characters
- strips disambiguation suffixes: "Ōmiya (Saitama)" -> "Ōmiya"
- sorts by English name and drops duplicates
- writes a TSV with a header row
"""

import csv
import html
import re
from typing import Iterable, List, NamedTuple, TextIO

from ftfy import fix_text

from wikidump.parser import Document

ROW_RE = re.compile(
    r"\|\[\[(?:[^|]+\|)?([^\]]+)\]\]\s*\|\|\[\[:ja:[^|]+\|([^\]]+)\]\][(（]([^）)]+)[）)]"
)
DISAMBIGUATION_RE = re.compile(r"\s*[(（][^）)]*[）)].*")

TSV_HEADER = ("name", "name_kana", "name_en")


class Station(NamedTuple):
    name: str
    name_kana: str
    name_en: str


def clean_field(text: str) -> str:
    # entities + mojibake only; width, quotes and normalization stay as written
    return fix_text(
        html.unescape(text),
        unescape_html=False,
        fix_character_width=False,
        fix_latin_ligatures=False,
        uncurl_quotes=False,
        normalization=None,
    ).strip()


def extract_stations(pages: Iterable[Document]) -> List[Station]:
    stations = []
    for page in pages:
        for en, name, kana in ROW_RE.findall(page.body):
            stations.append(Station(
                name=clean_field(name),
                name_kana=clean_field(kana),
                name_en=clean_field(en),
            ))
    return stations


def strip_disambiguation(text: str) -> str:
    return DISAMBIGUATION_RE.sub("", text)


def remove_disambiguations(stations: Iterable[Station]) -> List[Station]:
    return [Station(*(strip_disambiguation(f) for f in s)) for s in stations]


def uniquify(stations: Iterable[Station]) -> List[Station]:
    """Sort by (name_en, name, name_kana) and drop exact duplicates."""
    ordered = sorted(stations, key=lambda s: (s.name_en, s.name, s.name_kana))
    out: List[Station] = []
    for s in ordered:
        if not out or s != out[-1]:
            out.append(s)
    return out


def write_tsv(out: TextIO, stations: Iterable[Station]) -> int:
    """Write header + one row per station. Returns the number of rows."""
    w = csv.writer(out, delimiter="\t", lineterminator="\n")
    w.writerow(TSV_HEADER)
    n = 0
    for s in stations:
        w.writerow(s)
        n += 1
    return n
