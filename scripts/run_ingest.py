#!/usr/bin/env python3
"""
Fetch products from the unified products catalogue, embed them and store them in Qdrant.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from pharmassist.factory import build_ingestor
from pharmassist.utils.config_loader import load_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest catalogue products into the vector store")
    parser.add_argument("--config", type=Path, default=None, help="Path to pharmassist_config.yml (default: config/pharmassist_config.yml)")
    parser.add_argument("--max-items", type=int, default=0, help="Maximum products to ingest (0 = no limit)")
    parser.add_argument("--query", default=None, help="Ingest only the first product whose name contains this text")
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args()

    load_dotenv()
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    cfg = load_config(args.config)
    try:
        ingestor = build_ingestor(cfg)
        ingestor.initialize()
    except Exception as e:
        logger.error("Ingestion setup failed: %s", e)
        return 1

    if args.query:
        outcome = ingestor.ingest_by_query(args.query)
        print(json.dumps(outcome.to_dict(), indent=2))
        return 0 if outcome.success else 2

    summary = ingestor.ingest_all(max_items=args.max_items)
    print(json.dumps(summary.to_dict(), indent=2))
    logger.info(
        "Stored %s/%s products into Qdrant collection '%s'",
        summary.successful,
        summary.total_products,
        cfg.vector_store.collection,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
