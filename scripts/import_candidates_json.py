#!/usr/bin/env python3
"""
Import candidate records from a JSON export into the SQLite database.

Usage:
    python scripts/import_candidates_json.py --json data/candidates.json --db data/candidates.db
"""

import argparse
from pathlib import Path
import sys

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from hirefunnel.errors import FunnelError
from hirefunnel.importer import import_records, load_records
from hirefunnel.storage import CandidateStore


def migrate(json_path: Path, db_path: Path, dry_run: bool = False) -> bool:
    """
    Import candidates from JSON into the database.

    Args:
        json_path: Path to JSON file (array of records)
        db_path: Path to SQLite database file
        dry_run: If True, don't write to database
    """
    print(f"Loading candidates from {json_path}...")
    records = load_records(json_path)
    print(f"Found {len(records)} records in JSON file")

    store = CandidateStore(db_path)
    report = import_records(store, records, dry_run=dry_run)

    if dry_run:
        print("\n[DRY RUN] Would import the following candidates:")
        for i, candidate_id in enumerate(report.imported[:5], 1):
            print(f"  {i}. {candidate_id}")
        if len(report.imported) > 5:
            print(f"  ... and {len(report.imported) - 5} more")

    for key, message in report.errors.items():
        print(f"Skipping {key}: {message}")

    print("\nImport complete!" if not dry_run else "\nDry run complete.")
    print(f"   Imported: {len(report.imported)}")
    print(f"   Skipped:  {len(report.skipped)}")
    print(f"   Errors:   {len(report.errors)}")
    return not report.errors


def main():
    parser = argparse.ArgumentParser(description="Import candidates from JSON to database")
    parser.add_argument("--json", type=Path, default=Path("data/candidates.json"),
                        help="Path to JSON file")
    parser.add_argument("--db", type=Path, default=Path("data/candidates.db"),
                        help="Path to SQLite database file")
    parser.add_argument("--dry-run", action="store_true",
                        help="Show what would be imported without writing")

    args = parser.parse_args()

    if not args.json.exists():
        print(f"JSON file not found: {args.json}")
        sys.exit(1)

    try:
        ok = migrate(args.json, args.db, dry_run=args.dry_run)
    except FunnelError as e:
        print(f"Import failed: {e}")
        sys.exit(e.exit_code)
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
