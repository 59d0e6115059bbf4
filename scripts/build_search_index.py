#!/usr/bin/env python3
"""
Build the archive search index from the meeting log corpus.

Writes search-index.json (and meetings.json with every record) to the
output directory.

Usage:
    python scripts/build_search_index.py [--corpus dev-meeting-log] [--output data/site]
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from meetinglog.core.config import settings
from meetinglog.corpus import load_corpus
from meetinglog.search.indexer import IndexBuilder


def main():
    parser = argparse.ArgumentParser(description="Build the meeting log search index")
    parser.add_argument(
        "--corpus", default=settings.MEETING_LOG_PATH, help="Meeting log root directory"
    )
    parser.add_argument(
        "--output", default=settings.OUTPUT_DIR, help="Directory for generated files"
    )
    parser.add_argument(
        "--no-records",
        action="store_true",
        help=f"Skip writing {settings.RECORDS_FILENAME}",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    records = load_corpus(args.corpus)
    output_dir = Path(args.output)

    builder = IndexBuilder()
    entries = builder.build(records)
    index_path = builder.write(entries, output_dir / settings.SEARCH_INDEX_FILENAME)
    print(f"Indexed {len(entries)} meetings -> {index_path}")

    if not args.no_records:
        records_path = output_dir / settings.RECORDS_FILENAME
        records_path.write_text(
            json.dumps([r.to_dict() for r in records], indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"Wrote {len(records)} records -> {records_path}")


if __name__ == "__main__":
    main()
