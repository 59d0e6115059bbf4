#!/usr/bin/env python3
"""
Query a built search index from the terminal.

Usage:
    python scripts/search_index.py "bug 2019" [--index data/site/search-index.json] [--limit 10]
"""

import argparse
import json
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from meetinglog.core.config import settings
from meetinglog.search.searcher import SearchEngine, parse_index


def main():
    parser = argparse.ArgumentParser(description="Search the meeting log index")
    parser.add_argument("query", help="Free-text query (ticket numbers allowed)")
    parser.add_argument(
        "--index", default=str(settings.SEARCH_INDEX_PATH), help="Path to search-index.json"
    )
    parser.add_argument(
        "--limit", type=int, default=10, help="Maximum number of results"
    )
    args = parser.parse_args()

    with open(args.index, encoding="utf-8") as f:
        entries = parse_index(json.load(f))

    engine = SearchEngine.from_entries(entries, max_results=args.limit)
    result = engine.search(args.query)

    print(f"{result.total} results for {args.query!r}")
    for hit in result.hits:
        print(f"\n[{hit.score:4d}] {hit.entry.title} ({hit.entry.date or hit.entry.year})")
        print(f"       {hit.url}")
        print(f"       {hit.snippet.plain_text}")


if __name__ == "__main__":
    main()
