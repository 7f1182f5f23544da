#!/usr/bin/env python3
# =============================================================================
# scripts/seed_zips.py - Seed ZIP Records
# =============================================================================
# Creates one ZIP document per row of the ZIP metadata CSV, with the row's
# population. Existing documents keep their entries; only population is
# refreshed. Reports can only be posted for ZIPs seeded this way.
#
# Usage:
#   python scripts/seed_zips.py
#   python scripts/seed_zips.py --csv California_Zip_Codes.csv --dry-run
#
# Prerequisites:
#   - Environment variables must be set (.env file)
# =============================================================================

import argparse
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.config import settings
from lib.supabase_client import SupabaseClient
from lib.zip_metadata import ZipMetadataSource

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_zips")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Seed ZIP documents from the metadata CSV")
    parser.add_argument("--csv", default=settings.ZIP_METADATA_CSV, help="ZIP metadata CSV path")
    parser.add_argument("--zip-column", default=settings.ZIP_METADATA_ZIP_COLUMN)
    parser.add_argument("--population-column", default=settings.ZIP_METADATA_POPULATION_COLUMN)
    parser.add_argument("--dry-run", action="store_true", help="Print what would be written")
    return parser.parse_args(argv)


def main(argv=None):
    """Seed the store from the metadata CSV."""
    args = parse_args(argv)

    source = ZipMetadataSource(args.csv, zip_column=args.zip_column)
    pairs = source.populations(args.population_column)
    logger.info(f"Read {len(pairs)} ZIP codes from {args.csv}")

    if args.dry_run:
        for zip_code, population in pairs:
            print(f"{zip_code}\t{population}")
        return 0

    store = SupabaseClient.from_settings(settings)
    try:
        for zip_code, population in pairs:
            store.upsert_zip(zip_code, population)
    finally:
        store.close()

    logger.info(f"Seeded {len(pairs)} ZIP codes")
    return 0


if __name__ == "__main__":
    sys.exit(main())
