"""
Services Package

This package contains the services used to move highlights from a Kobo
device into a Calibre library: database access on both sides, EPUB loading,
and the translation of Kobo highlight positions into Calibre's format.
"""

from .base_database_service import BaseDatabaseService
from .book_processor import BookProcessor
from .bookmark_translator import BookmarkTranslator
from .calibre_database_service import CalibreDatabaseService, SaveResult
from .chapter_processor import process_chapter
from .kobo_database_service import KoboDatabaseService
from .sync_service import SyncService

__all__ = [
    "BaseDatabaseService",
    "BookProcessor",
    "BookmarkTranslator",
    "CalibreDatabaseService",
    "KoboDatabaseService",
    "SaveResult",
    "SyncService",
    "process_chapter",
]
