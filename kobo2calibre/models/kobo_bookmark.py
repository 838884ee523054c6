"""
Kobo Bookmark Models

Pydantic models for highlight rows read from the Kobo device database
(``.kobo/KoboReader.sqlite``), and the volume/chapter groupings built on top.
"""

from typing import Any, Mapping

from pydantic import BaseModel


class KoboBookmark(BaseModel):
    """A highlight as stored in Kobo's Bookmark table (joined with Content)"""

    bookmark_id: str
    volume_id: str
    content_id: str

    # e.g. "OEBPS/cha42.xhtml#point(/1/4/78/1:586)"
    start_container_path: str
    end_container_path: str

    text: str = ""
    annotation: str | None = None
    date_created: str  # Kobo local timestamp, e.g. "2023-04-01T18:22:31.000"

    book_title: str = ""
    chapter_title: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "KoboBookmark":
        return cls(
            bookmark_id=row["BookmarkID"],
            volume_id=row["VolumeID"],
            content_id=row["ContentID"],
            start_container_path=row["StartContainerPath"] or "",
            end_container_path=row["EndContainerPath"] or "",
            text=row["Text"] or "",
            annotation=row["Annotation"],
            date_created=row["DateCreated"] or "",
            book_title=row["BookTitle"] or "",
            chapter_title=row["Title"],
        )


class KoboChapter(BaseModel):
    """Bookmarks sharing one content id, i.e. one EPUB resource"""

    id: str
    title: str | None = None
    path: str
    bookmarks: list[KoboBookmark]


class KoboVolume(BaseModel):
    """All bookmarks of one book on the device"""

    id: str
    title: str
    bookmarks: list[KoboBookmark]
