"""
Match Kobo volumes with Calibre books.

Matching is done on the title alone: the Kobo database has no author for
sideloaded books, only possibly as part of the file name, and Calibre's file
naming is configurable. Titles that are not unique on either side are
reported and skipped rather than guessed.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from ..models.calibre_annotation import CalibreBook
from ..models.kobo_bookmark import KoboVolume

logger = logging.getLogger(__name__)


@dataclass
class LibraryMatch:
    volume: KoboVolume
    book: CalibreBook


@dataclass
class MatchResult:
    matched: List[LibraryMatch] = field(default_factory=list)
    unmatched: List[str] = field(default_factory=list)


def match_volumes(
    volumes: Iterable[KoboVolume], books: Iterable[CalibreBook]
) -> MatchResult:
    volumes_by_title: Dict[str, List[KoboVolume]] = {}
    for volume in volumes:
        volumes_by_title.setdefault(volume.title, []).append(volume)

    books_by_title: Dict[str, List[CalibreBook]] = {}
    for book in books:
        books_by_title.setdefault(book.title, []).append(book)

    result = MatchResult()
    for title, candidates in volumes_by_title.items():
        calibre_books = books_by_title.get(title, [])

        if len(candidates) == 1 and len(calibre_books) == 1:
            result.matched.append(LibraryMatch(volume=candidates[0], book=calibre_books[0]))
            continue

        if not calibre_books:
            logger.warning(f"No Calibre book titled: {title}")
        else:
            logger.error(
                "Could not match book on just the title "
                f"({len(candidates)} on Kobo, {len(calibre_books)} in Calibre)"
            )
            logger.error(f"Skipping: {title}")
        result.unmatched.append(title)

    return result
