"""
Translation Outcome Types

Each bookmark translates into exactly one outcome: a highlight, or a failure
saying which bookmark could not be placed and why. Reports collect outcomes
so callers don't have to scrape the log to know what was skipped.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from .calibre_annotation import CalibreHighlight


class TranslationTier(str, Enum):
    PRECISE = "precise"  # boundaries recomputed by searching the text
    FALLBACK = "fallback"  # Kobo offsets translated as-is


@dataclass
class TranslationSuccess:
    highlight: CalibreHighlight
    tier: TranslationTier

    @property
    def bookmark_id(self) -> str:
        return self.highlight.uuid

    @property
    def ok(self) -> bool:
        return True


@dataclass
class TranslationFailure:
    bookmark_id: str
    reason: str
    endpoint: Optional[str] = None  # "start", "end" or None for malformed input

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        if self.endpoint:
            return f"bookmark {self.bookmark_id} ({self.endpoint}): {self.reason}"
        return f"bookmark {self.bookmark_id}: {self.reason}"


TranslationOutcome = Union[TranslationSuccess, TranslationFailure]


@dataclass
class BookSyncReport:
    """What happened to one Kobo volume when written into Calibre."""

    title: str
    inserted: int = 0
    updated: int = 0
    unchanged: int = 0
    failures: List[TranslationFailure] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.failures)


@dataclass
class SyncReport:
    books: List[BookSyncReport] = field(default_factory=list)
    unmatched_titles: List[str] = field(default_factory=list)

    @property
    def total_failures(self) -> int:
        return sum(book.skipped for book in self.books)
