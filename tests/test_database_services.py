"""
Unit tests for the Kobo and Calibre database services.

Tests cover:
- Reading highlights (and only highlights) from the Kobo database
- Read-only access to the Kobo database
- Calibre book lookup by title
- Insert / update / unchanged decisions when saving annotations
- Dry runs that never write
"""

import json
import sqlite3

import pytest

from kobo2calibre.models.calibre_annotation import CalibreAnnotation, CalibreHighlight
from kobo2calibre.services.calibre_database_service import (
    CalibreDatabaseService,
    SaveResult,
)
from kobo2calibre.services.kobo_database_service import KoboDatabaseService


@pytest.fixture
def kobo_db(kobo_volume):
    return KoboDatabaseService.for_volume(str(kobo_volume))


@pytest.fixture
def calibre_db(library_dir):
    return CalibreDatabaseService.for_library(str(library_dir))


def make_annotation(text="Hello world", end_cfi="/2/4/2/2/1:4") -> CalibreAnnotation:
    highlight = CalibreHighlight(
        highlighted_text=text,
        spine_index=1,
        spine_name="OEBPS/text/ch2.xhtml",
        start_cfi="/2/4/2/1:0",
        end_cfi=end_cfi,
        timestamp="2023-04-01T18:22:31.000Z",
        uuid="bm-1",
        toc_family_titles=["Part One", "Chapter Two"],
        epoch_timestamp=1680373351.0,
    )
    return CalibreAnnotation.from_highlight(1, highlight)


def count_annotations(calibre_db):
    with calibre_db.get_connection() as conn:
        return conn.execute("SELECT COUNT(*) FROM annotations").fetchone()[0]


class TestKoboDatabaseService:
    """Test reading the Kobo database"""

    def test_path_for_volume(self, kobo_volume):
        service = KoboDatabaseService.for_volume(str(kobo_volume))
        assert service.db_path.endswith(".kobo/KoboReader.sqlite")
        assert service.exists()

    def test_reads_only_highlights(self, kobo_db):
        bookmarks = kobo_db.get_highlights()
        assert sorted(b.bookmark_id for b in bookmarks) == ["bm-1", "bm-2", "bm-3"]

    def test_rows_become_bookmarks(self, kobo_db):
        bookmark = {b.bookmark_id: b for b in kobo_db.get_highlights()}["bm-1"]

        assert bookmark.text == "Hello world"
        assert bookmark.book_title == "Test Book"
        assert bookmark.chapter_title == "Chapter Two"
        assert bookmark.start_container_path == "OEBPS/text/ch2.xhtml#point(/1/4/2/1:0)"
        assert bookmark.date_created == "2023-04-01T18:22:31.000"

    def test_connection_is_read_only(self, kobo_db):
        with kobo_db.get_connection() as conn:
            with pytest.raises(sqlite3.OperationalError):
                conn.execute("DELETE FROM Bookmark")

    def test_missing_database_reads_nothing(self, tmp_path):
        service = KoboDatabaseService.for_volume(str(tmp_path))
        assert not service.exists()
        assert service.get_highlights() == []


class TestCalibreBooks:
    """Test looking up books"""

    def test_find_books_by_titles(self, calibre_db):
        books = calibre_db.find_books_by_titles(["Test Book", "Unknown Book"])
        assert len(books) == 1
        assert books[0].id == 1
        assert books[0].path == "Jane Doe/Test Book (1)"

    def test_no_titles(self, calibre_db):
        assert calibre_db.find_books_by_titles([]) == []


class TestSaveAnnotation:
    """Test the insert / update / unchanged decision"""

    def test_insert(self, calibre_db):
        assert calibre_db.save_annotation(make_annotation()) == SaveResult.INSERTED

        with calibre_db.get_connection() as conn:
            row = conn.execute("SELECT * FROM annotations").fetchone()
        assert row["book"] == 1
        assert row["format"] == "EPUB"
        assert row["user_type"] == "local"
        assert row["user"] == "viewer"
        assert row["annot_type"] == "highlight"
        assert row["searchable_text"] == "Hello world"
        assert json.loads(row["annot_data"])["toc_family_titles"] == [
            "Part One",
            "Chapter Two",
        ]

    def test_unchanged(self, calibre_db):
        calibre_db.save_annotation(make_annotation())
        assert calibre_db.save_annotation(make_annotation()) == SaveResult.UNCHANGED
        assert count_annotations(calibre_db) == 1

    def test_update(self, calibre_db):
        calibre_db.save_annotation(make_annotation())
        changed = make_annotation(end_cfi="/2/4/2/2/1:3")

        assert calibre_db.save_annotation(changed) == SaveResult.UPDATED
        assert count_annotations(calibre_db) == 1
        stored = calibre_db.get_annotation("bm-1")
        assert json.loads(stored["annot_data"])["end_cfi"] == "/2/4/2/2/1:3"

    def test_dry_run_insert(self, calibre_db):
        assert (
            calibre_db.save_annotation(make_annotation(), dry_run=True)
            == SaveResult.INSERTED
        )
        assert count_annotations(calibre_db) == 0

    def test_dry_run_update(self, calibre_db):
        calibre_db.save_annotation(make_annotation())
        changed = make_annotation(text="Hello")

        assert calibre_db.save_annotation(changed, dry_run=True) == SaveResult.UPDATED
        assert calibre_db.get_annotation("bm-1")["searchable_text"] == "Hello world"

    def test_write_errors_propagate(self, tmp_path):
        service = CalibreDatabaseService(str(tmp_path / "empty.db"))
        with pytest.raises(sqlite3.OperationalError):
            service.save_annotation(make_annotation())


class TestAnnotationData:
    """Test the JSON written to annot_data"""

    def test_annot_data_fields(self):
        data = json.loads(make_annotation().annot_data)
        assert list(data) == [
            "highlighted_text",
            "spine_index",
            "spine_name",
            "start_cfi",
            "end_cfi",
            "style",
            "timestamp",
            "type",
            "uuid",
            "toc_family_titles",
        ]
        assert data["style"] == {"kind": "color", "type": "builtin", "which": "green"}

    def test_row_timestamp_is_epoch_seconds(self):
        assert make_annotation().timestamp == 1680373351.0
