"""
Book Processor Module

Streams the highlights of one Kobo volume, chapter by chapter, out of the
matching EPUB in the Calibre library. Each chapter is parsed once, used for
all its bookmarks, then dropped before the next chapter is loaded.
"""

import logging
from typing import Iterator, Optional

from ..models.calibre_annotation import CalibreBook
from ..models.kobo_bookmark import KoboVolume
from ..models.translation import (
    TranslationFailure,
    TranslationOutcome,
    TranslationSuccess,
)
from .bookmark_grouping import group_by_chapter
from .bookmark_translator import BookmarkTranslator
from .chapter_processor import process_chapter
from .epub import EPUBBookService, EPUBTocService

logger = logging.getLogger(__name__)


class BookProcessor:
    def __init__(
        self,
        library_path: str,
        translator: Optional[BookmarkTranslator] = None,
        epub_service: Optional[EPUBBookService] = None,
        toc_service: Optional[EPUBTocService] = None,
    ):
        self.translator = translator or BookmarkTranslator()
        self.epub_service = epub_service or EPUBBookService(library_path)
        self.toc_service = toc_service or EPUBTocService()

    def process(
        self, volume: KoboVolume, book: CalibreBook
    ) -> Iterator[TranslationOutcome]:
        """
        Yield translation outcomes for every bookmark of ``volume``.

        Successful highlights carry the TOC breadcrumb of their chapter. When
        the EPUB cannot be found or read, every bookmark fails.
        """
        epub_path = self.epub_service.find_epub(book.path)
        if epub_path is None:
            logger.error(f"Could not find book EPUB file for: {book.title}")
            yield from self._fail_all(volume, "EPUB file not found")
            return

        try:
            epub_book = self.epub_service.read_book(epub_path)
        except Exception as e:
            logger.error(f"Could not read EPUB {epub_path}: {e}")
            yield from self._fail_all(volume, "EPUB file unreadable")
            return

        toc = self.toc_service.build_table_of_contents(epub_book)

        for chapter in group_by_chapter(volume.bookmarks):
            logger.debug(
                f"Processing {len(chapter.bookmarks)} bookmark(s) in {chapter.path}"
            )
            document = self.epub_service.load_chapter(epub_book, chapter.path)
            breadcrumb = toc.breadcrumb(chapter.path)

            for outcome in process_chapter(document, chapter, self.translator):
                if isinstance(outcome, TranslationSuccess):
                    outcome.highlight.toc_family_titles = list(breadcrumb)
                yield outcome

    def _fail_all(
        self, volume: KoboVolume, reason: str
    ) -> Iterator[TranslationFailure]:
        for bookmark in volume.bookmarks:
            yield TranslationFailure(bookmark_id=bookmark.bookmark_id, reason=reason)
