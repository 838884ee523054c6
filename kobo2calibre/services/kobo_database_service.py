"""
Kobo Database Service Module

Reads highlight bookmarks from the Kobo device database
(``<volume>/.kobo/KoboReader.sqlite``). The database is opened read-only.

Columns used:
    * ``BookmarkID``: used as annotation id on the Calibre side, which makes
      repeated syncs update instead of duplicate.
    * ``VolumeID``: id of the book (volume).
    * ``ContentID``: id of the chapter the bookmark is in.
    * ``StartContainerPath`` / ``EndContainerPath``: CFI-like paths of the
      highlight boundaries, with byte offsets.
    * ``Text``: the highlighted text.
    * ``Annotation``: user note, carried along but not exported.
    * ``DateCreated``: creation date and time.
    * ``BookTitle`` / ``Title``: book and chapter titles from Content.
"""

import logging
import os
from typing import List

from ..models.kobo_bookmark import KoboBookmark
from .base_database_service import BaseDatabaseService

logger = logging.getLogger(__name__)

HIGHLIGHTS_QUERY = """
    SELECT b.BookmarkID,
           b.VolumeID,
           b.ContentID,
           b.StartContainerPath,
           b.EndContainerPath,
           b.Text,
           b.Annotation,
           b.DateCreated,
           c.BookTitle,
           c.Title
      FROM Bookmark AS b
      JOIN Content AS c
        ON c.ContentID = b.ContentID
     WHERE b.Type = 'highlight'
"""


class KoboDatabaseService(BaseDatabaseService):
    """Read-only access to the Kobo device database."""

    def __init__(self, db_path: str):
        super().__init__(db_path, read_only=True)

    @classmethod
    def for_volume(cls, volume_path: str) -> "KoboDatabaseService":
        return cls(os.path.join(volume_path, ".kobo", "KoboReader.sqlite"))

    def get_highlights(self) -> List[KoboBookmark]:
        """Return every highlight bookmark on the device."""
        rows = self.execute_query(HIGHLIGHTS_QUERY, fetch_all=True)
        if not rows:
            return []

        bookmarks = []
        for row in rows:
            try:
                bookmarks.append(KoboBookmark.from_row(row))
            except Exception as e:
                logger.warning(f"Ignoring unreadable bookmark row {row['BookmarkID']}: {e}")
        logger.info(f"Read {len(bookmarks)} highlight(s) from {self.db_path}")
        return bookmarks
