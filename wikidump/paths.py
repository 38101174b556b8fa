# wikidump/paths.py

import os

# --- Base data paths ---
DATA_DIR = os.getenv("WIKIDUMP_DATA_DIR", "data")

# --- Source dump files (multistream archive + its offset index) ---
DUMP_PATH = os.path.join(DATA_DIR, "enwiki-20210920-pages-articles-multistream.xml.bz2")
INDEX_PATH = os.path.join(DATA_DIR, "enwiki-20210920-pages-articles-multistream-index.txt.bz2")

# --- Pages we care about ---
LIST_PAGE_PREFIX = "List of railway stations in Japan: "

# --- Bytes per read() when streaming a compressed block ---
READ_CHUNK_SIZE = 1024 * 1024
