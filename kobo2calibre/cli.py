"""Command-line entry point: copy Kobo highlights into a Calibre library.

Usage:
    kobo2calibre /media/KOBOeReader ~/"Calibre Library"
    kobo2calibre /media/KOBOeReader ~/"Calibre Library" --dry-run --verbose
"""

import argparse
import logging
import sys
from typing import List, Optional

from kobo2calibre.services import SyncService

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the CLI argument parser.

    Returns:
        Configured ArgumentParser for testing and main().
    """
    parser = argparse.ArgumentParser(
        prog="kobo2calibre",
        description="Copy Kobo highlights into Calibre's EPUB viewer annotations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "kobo_volume", help="Mount point of the Kobo (the folder holding .kobo/)"
    )
    parser.add_argument(
        "calibre_library", help="Calibre library folder (the one holding metadata.db)"
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Translate highlights and report counts without writing to Calibre",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    return parser


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    configure_logging(args.verbose)

    service = SyncService.from_paths(
        args.kobo_volume, args.calibre_library, dry_run=args.dry_run
    )

    if not service.kobo_db.exists():
        print(f"❌ Kobo database not found: {service.kobo_db.db_path}")
        return 1
    if not service.calibre_db.exists():
        print(f"❌ Calibre database not found: {service.calibre_db.db_path}")
        return 1

    report = service.run(
        on_book_start=lambda title: print(f"Fetching highlights for: {title}")
    )

    for book in report.books:
        print(f"Inserted {book.inserted}")
        print(f"Updated {book.updated}")
        print(f"Unchanged {book.unchanged}")
        print(f"Skipped {book.skipped}")
        for failure in book.failures:
            print(f"  ⚠️  {failure.describe()}")

    for title in report.unmatched_titles:
        print(f"Not in Calibre (or ambiguous): {title}")

    if args.dry_run:
        print("Dry run: nothing was written")

    return 0


if __name__ == "__main__":
    sys.exit(main())
