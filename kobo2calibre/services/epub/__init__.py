# EPUB Service Components
from .epub_book_service import EPUBBookService
from .epub_path_helper import EPUBPathHelper
from .epub_toc_service import EPUBTocService, TableOfContents, TocEntry

__all__ = [
    "EPUBBookService",
    "EPUBPathHelper",
    "EPUBTocService",
    "TableOfContents",
    "TocEntry",
]
