"""
Sync Service Module

Copies highlights from a Kobo device into a Calibre library:

1. read highlight bookmarks from the Kobo database and group them by book,
2. match each book with a Calibre book by title,
3. translate the bookmarks of each matched book chapter by chapter,
4. insert new highlights into Calibre, update changed ones.

Highlights are pulled one at a time and stored before the next one is
translated. Bookmarks that cannot be translated are counted and reported,
they never stop the sync.
"""

import logging
from typing import Callable, Optional

from ..models.calibre_annotation import CalibreAnnotation
from ..models.translation import BookSyncReport, SyncReport, TranslationFailure
from .book_processor import BookProcessor
from .bookmark_grouping import group_by_volume
from .calibre_database_service import CalibreDatabaseService, SaveResult
from .kobo_database_service import KoboDatabaseService
from .library_matcher import LibraryMatch, match_volumes

logger = logging.getLogger(__name__)


class SyncService:
    def __init__(
        self,
        kobo_db: KoboDatabaseService,
        calibre_db: CalibreDatabaseService,
        book_processor: BookProcessor,
        dry_run: bool = False,
    ):
        self.kobo_db = kobo_db
        self.calibre_db = calibre_db
        self.book_processor = book_processor
        self.dry_run = dry_run

    @classmethod
    def from_paths(
        cls, kobo_volume_path: str, calibre_library_path: str, dry_run: bool = False
    ) -> "SyncService":
        return cls(
            kobo_db=KoboDatabaseService.for_volume(kobo_volume_path),
            calibre_db=CalibreDatabaseService.for_library(calibre_library_path),
            book_processor=BookProcessor(calibre_library_path),
            dry_run=dry_run,
        )

    def run(
        self, on_book_start: Optional[Callable[[str], None]] = None
    ) -> SyncReport:
        report = SyncReport()

        volumes = group_by_volume(self.kobo_db.get_highlights())
        if not volumes:
            logger.info("No highlights found on the Kobo")
            return report

        books = self.calibre_db.find_books_by_titles(v.title for v in volumes)
        matches = match_volumes(volumes, books)
        report.unmatched_titles.extend(matches.unmatched)

        for match in matches.matched:
            if on_book_start:
                on_book_start(match.volume.title)
            report.books.append(self.sync_book(match))

        return report

    def sync_book(self, match: LibraryMatch) -> BookSyncReport:
        logger.debug(f"Fetching highlights for: {match.volume.title}")
        book_report = BookSyncReport(title=match.volume.title)

        for outcome in self.book_processor.process(match.volume, match.book):
            if isinstance(outcome, TranslationFailure):
                book_report.failures.append(outcome)
                continue

            annotation = CalibreAnnotation.from_highlight(match.book.id, outcome.highlight)
            result = self.calibre_db.save_annotation(annotation, dry_run=self.dry_run)

            if result == SaveResult.INSERTED:
                book_report.inserted += 1
            elif result == SaveResult.UPDATED:
                book_report.updated += 1
            else:
                book_report.unchanged += 1

        logger.info(
            f"{match.volume.title}: {book_report.inserted} inserted, "
            f"{book_report.updated} updated, {book_report.unchanged} unchanged, "
            f"{book_report.skipped} skipped"
        )
        return book_report
