"""
Calibre Database Service Module

Looks up books and stores highlights in a Calibre library's ``metadata.db``.

Schema used (owned by Calibre):
    books (id, title, path, ...)
    annotations (
        book, format, user_type, user, timestamp,
        annot_id, annot_type, annot_data, searchable_text
    )

Highlights are keyed by ``annot_id`` (the Kobo bookmark id), so running a sync
twice updates or leaves rows alone instead of duplicating them.
"""

import logging
import os
from enum import Enum
from typing import Iterable, List

from ..models.calibre_annotation import CalibreAnnotation, CalibreBook
from .base_database_service import BaseDatabaseService

logger = logging.getLogger(__name__)


class SaveResult(str, Enum):
    INSERTED = "inserted"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


class CalibreDatabaseService(BaseDatabaseService):
    """SQLite helper for the Calibre library database."""

    def __init__(self, db_path: str):
        super().__init__(db_path)

    @classmethod
    def for_library(cls, library_path: str) -> "CalibreDatabaseService":
        return cls(os.path.join(library_path, "metadata.db"))

    def find_books_by_titles(self, titles: Iterable[str]) -> List[CalibreBook]:
        """Return the books whose title is one of ``titles``."""
        titles = list(titles)
        if not titles:
            return []

        placeholders = ", ".join("?" for _ in titles)
        query = f"SELECT id, title, path FROM books WHERE title IN ({placeholders})"
        rows = self.execute_query(query, tuple(titles), fetch_all=True)
        return [CalibreBook(**dict(row)) for row in rows] if rows else []

    def get_annotation(self, annot_id: str):
        return self.execute_query(
            "SELECT annot_data, searchable_text FROM annotations WHERE annot_id = ?",
            (annot_id,),
            fetch_one=True,
        )

    def save_annotation(
        self, annotation: CalibreAnnotation, dry_run: bool = False
    ) -> SaveResult:
        """
        Insert the annotation, or update it if its content changed.

        With ``dry_run`` nothing is written; the result tells what would happen.
        """
        existing = self.get_annotation(annotation.annot_id)

        if existing:
            if (
                existing["annot_data"] == annotation.annot_data
                and existing["searchable_text"] == annotation.searchable_text
            ):
                return SaveResult.UNCHANGED

            if dry_run:
                return SaveResult.UPDATED

            self.execute_write(
                """
                UPDATE annotations
                   SET annot_data = ?, searchable_text = ?
                 WHERE annot_id = ?
                """,
                (annotation.annot_data, annotation.searchable_text, annotation.annot_id),
            )
            logger.debug(f"Updated annotation {annotation.annot_id}")
            return SaveResult.UPDATED

        if dry_run:
            return SaveResult.INSERTED

        self.execute_write(
            """
            INSERT INTO annotations (
                book, format, user_type, user, timestamp,
                annot_id, annot_type, annot_data, searchable_text
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                annotation.book,
                annotation.format,
                annotation.user_type,
                annotation.user,
                annotation.timestamp,
                annotation.annot_id,
                annotation.annot_type,
                annotation.annot_data,
                annotation.searchable_text,
            ),
        )
        logger.debug(f"Inserted annotation {annotation.annot_id}")
        return SaveResult.INSERTED
