#!/usr/bin/env python3
"""
Run semantic searches against the ingested catalogue and print the matches.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from pharmassist.factory import build_retrieval
from pharmassist.utils.config_loader import load_config

DEFAULT_QUERIES = [
    "paracetamol",
    "antibiotics",
    "cough syrup",
    "blood pressure medication",
    "diabetes care",
    "pregnant care",
    "malaria treatment",
    "pain relief",
    "vitamins and supplements",
    "allergy medicine",
]


def main() -> int:
    parser = argparse.ArgumentParser(description="Search the medicine catalogue")
    parser.add_argument("queries", nargs="*", help="Search queries (default: a fixed set of common requests)")
    parser.add_argument("--config", type=Path, default=None, help="Path to pharmassist_config.yml")
    parser.add_argument("--limit", type=int, default=None, help="Results per query (default: retrieval.top_k)")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    load_dotenv()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    cfg = load_config(args.config)
    retrieval = build_retrieval(cfg)
    limit = args.limit or cfg.retrieval.top_k

    for query in args.queries or DEFAULT_QUERIES:
        result = retrieval.search(query, limit)
        print(f'\n=== "{query}" ({result.total_results} results, {result.execution_time_ms:.0f}ms) ===')
        if not result.medicines:
            print("  No results found")
            continue
        for i, med in enumerate(result.medicines, start=1):
            print(f"  {i}. {med.product_name}")
            print(f"     Category: {med.category_name} | Price: ₦{med.price:g} | Qty: {med.quantity} | Score: {med.score:.3f}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
