"""
Calibre Annotation Models

Pydantic models for highlights in the shape Calibre's EPUB viewer stores them
in the ``annotations`` table of ``metadata.db``. Boundaries are EPUB CFI
expressions with character offsets (``start_cfi`` / ``end_cfi``).
"""

import json

from pydantic import BaseModel, Field


class HighlightStyle(BaseModel):
    kind: str = "color"
    type: str = "builtin"
    which: str = "green"


class CalibreHighlight(BaseModel):
    """The ``annot_data`` payload of a Calibre highlight"""

    highlighted_text: str
    spine_index: int
    spine_name: str
    start_cfi: str
    end_cfi: str
    style: HighlightStyle = Field(default_factory=HighlightStyle)
    timestamp: str  # ISO timestamp with "Z" suffix
    type: str = "highlight"
    uuid: str

    # Filled in once the chapter's place in the table of contents is known
    toc_family_titles: list[str] = Field(default_factory=list)

    # Not part of annot_data: epoch seconds for the row-level timestamp column
    epoch_timestamp: float = Field(default=0.0, exclude=True)


class CalibreBook(BaseModel):
    """A row of Calibre's ``books`` table"""

    id: int
    title: str
    path: str


class CalibreAnnotation(BaseModel):
    """A row of Calibre's ``annotations`` table"""

    book: int
    format: str = "EPUB"
    user_type: str = "local"
    user: str = "viewer"
    timestamp: float
    annot_id: str
    annot_type: str = "highlight"
    annot_data: str  # JSON serialized CalibreHighlight
    searchable_text: str

    @classmethod
    def from_highlight(
        cls, book_id: int, highlight: CalibreHighlight
    ) -> "CalibreAnnotation":
        return cls(
            book=book_id,
            timestamp=highlight.epoch_timestamp,
            annot_id=highlight.uuid,
            annot_type=highlight.type,
            annot_data=json.dumps(highlight.model_dump()),
            searchable_text=highlight.highlighted_text,
        )
