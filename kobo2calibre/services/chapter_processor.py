import logging
from typing import Iterator, Optional

from bs4 import BeautifulSoup

from ..models.kobo_bookmark import KoboChapter
from ..models.translation import TranslationFailure, TranslationOutcome
from .bookmark_translator import BookmarkTranslator

logger = logging.getLogger(__name__)


def process_chapter(
    document: Optional[BeautifulSoup],
    chapter: KoboChapter,
    translator: Optional[BookmarkTranslator] = None,
) -> Iterator[TranslationOutcome]:
    """
    Yield one outcome per bookmark of ``chapter``, in bookmark order.

    Outcomes are produced lazily, so the caller can store each highlight
    before the next one is computed. A missing document fails every bookmark
    of the chapter.
    """
    translator = translator or BookmarkTranslator()

    if document is None:
        logger.warning(f"Chapter {chapter.path} could not be loaded")
        for bookmark in chapter.bookmarks:
            yield TranslationFailure(
                bookmark_id=bookmark.bookmark_id, reason="chapter not found"
            )
        return

    for bookmark in chapter.bookmarks:
        yield translator.translate_outcome(document, bookmark)
