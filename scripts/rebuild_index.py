#!/usr/bin/env python3
"""
Index Rebuild Utility
Builds the portfolio corpus with the configured embedding provider, reports
what was indexed, and optionally runs a query against it.
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from portfolio_search.core import config
from portfolio_search.core.errors import CorpusConstructionError


def main():
    """Rebuild the in-memory index and print a summary."""
    parser = argparse.ArgumentParser(description="Build the portfolio search index and optionally query it")
    parser.add_argument("--query", "-q", help="Query to run after the index is built")
    parser.add_argument("--top-k", type=int, default=config.SEARCH_TOP_K, help="Maximum results to print")
    parser.add_argument("--min-score", type=float, default=config.SEARCH_MIN_SCORE, help="Minimum similarity score")
    args = parser.parse_args()

    issues = config.validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}")
        sys.exit(1)

    print(f"Building index from {config.CONTENT_DIR} with provider '{config.EMBED_PROVIDER}'...")

    store = config.get_vector_store()
    try:
        store.initialize()
    except CorpusConstructionError as e:
        print(f"ERROR: Index build failed: {e}")
        sys.exit(1)

    print(f"✓ Indexed {len(store)} items (dimension {store.dimension})")
    for content_type, count in sorted(store.stats().items()):
        print(f"  {content_type}: {count}")

    if not args.query:
        return

    results = store.search(args.query, top_k=args.top_k, min_score=args.min_score)
    if not results:
        print(f"No results for '{args.query}' above {args.min_score}")
        return

    print(f"\nTop {len(results)} results for '{args.query}':")
    for rank_position, result in enumerate(results, start=1):
        first_line = result.content.splitlines()[0]
        print(f"{rank_position}. [{result.type}] {result.id} score={result.score:.3f} {first_line}")


if __name__ == "__main__":
    main()
