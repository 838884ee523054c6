import logging
from pathlib import Path
from typing import Optional

import ebooklib
from bs4 import BeautifulSoup
from ebooklib import epub

from ..cfi import parse_chapter
from .epub_path_helper import EPUBPathHelper

logger = logging.getLogger(__name__)


class EPUBBookService:
    """Locates a book's EPUB in the Calibre library and loads its chapters."""

    def __init__(self, library_path: str):
        self.library_path = Path(library_path)

    def find_epub(self, book_path: str) -> Optional[Path]:
        """
        Find the EPUB file inside a Calibre book directory

        Args:
            book_path: Book directory relative to the library ("Author/Title (12)")

        Returns:
            Path to the first EPUB file found, or None
        """
        book_dir = self.library_path / book_path
        if not book_dir.is_dir():
            logger.error(f"Book directory not found: {book_dir}")
            return None

        candidates = sorted(
            path for path in book_dir.iterdir() if path.suffix.lower() == ".epub"
        )
        return candidates[0] if candidates else None

    def read_book(self, epub_path: Path):
        return epub.read_epub(str(epub_path), {"ignore_ncx": False})

    def _is_document_item(self, item) -> bool:
        """Some ebooklib builds report document items with type 0 instead of ITEM_DOCUMENT."""
        if not item:
            return False
        try:
            item_type = item.get_type()
        except Exception:
            return False
        return item_type in {getattr(ebooklib, "ITEM_DOCUMENT", None), 0}

    def find_chapter_item(self, book, chapter_path: str):
        """Find the manifest item for a chapter path as Kobo records it."""
        documents = [item for item in book.get_items() if self._is_document_item(item)]

        target = EPUBPathHelper.normalize_resource_path(chapter_path)
        for item in documents:
            if EPUBPathHelper.normalize_resource_path(item.get_name()) == target:
                return item

        for item in documents:
            if EPUBPathHelper.paths_match(item.get_name(), chapter_path):
                return item

        return None

    def load_chapter(self, book, chapter_path: str) -> Optional[BeautifulSoup]:
        """Parse the chapter at ``chapter_path``; None when the EPUB lacks it."""
        item = self.find_chapter_item(book, chapter_path)
        if item is None:
            logger.warning(f"Chapter {chapter_path} not found in EPUB")
            return None
        # EpubHtml.get_content() rebuilds the page from a template, which
        # shifts node positions; parse the file exactly as stored instead
        return parse_chapter(item.content)
