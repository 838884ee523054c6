"""
Shared fixtures: chapter documents, Kobo bookmarks, temporary Kobo and
Calibre databases, and a small EPUB inside a Calibre library folder.
"""

import sqlite3
import zipfile
from pathlib import Path

import pytest

from kobo2calibre.models.kobo_bookmark import KoboBookmark
from kobo2calibre.services.cfi import parse_chapter

CHAPTER_TWO = """<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>Chapter Two</title></head>
<body>
<p>Hello <em>world</em>!</p>
<p>Ça commence très bien.</p>
</body>
</html>
"""

CHAPTER_ONE = """<?xml version="1.0" encoding="utf-8"?>
<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>Part One</title></head>
<body><h1>Part One</h1></body>
</html>
"""

CONTAINER_XML = """<?xml version="1.0" encoding="utf-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="OEBPS/content.opf" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""

CONTENT_OPF = """<?xml version="1.0" encoding="utf-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="bookid">
  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">
    <dc:title>Test Book</dc:title>
    <dc:identifier id="bookid">urn:uuid:6f1c1b52-9d1f-4d1e-9a57-2f0e5d4c1a10</dc:identifier>
    <dc:language>en</dc:language>
  </metadata>
  <manifest>
    <item id="ncx" href="toc.ncx" media-type="application/x-dtbncx+xml"/>
    <item id="ch1" href="text/ch1.xhtml" media-type="application/xhtml+xml"/>
    <item id="ch2" href="text/ch2.xhtml" media-type="application/xhtml+xml"/>
  </manifest>
  <spine toc="ncx">
    <itemref idref="ch1"/>
    <itemref idref="ch2"/>
  </spine>
</package>
"""

TOC_NCX = """<?xml version="1.0" encoding="utf-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">
  <head>
    <meta name="dtb:uid" content="urn:uuid:6f1c1b52-9d1f-4d1e-9a57-2f0e5d4c1a10"/>
  </head>
  <docTitle><text>Test Book</text></docTitle>
  <navMap>
    <navPoint id="p1" playOrder="1">
      <navLabel><text>Part One</text></navLabel>
      <content src="text/ch1.xhtml"/>
      <navPoint id="p2" playOrder="2">
        <navLabel><text>Chapter Two</text></navLabel>
        <content src="text/ch2.xhtml"/>
      </navPoint>
    </navPoint>
  </navMap>
</ncx>
"""

CONTENT_ID = "file:///mnt/onboard/Test Book.epub#(1)OEBPS/text/ch2.xhtml"


def write_epub(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("mimetype", "application/epub+zip", zipfile.ZIP_STORED)
        archive.writestr("META-INF/container.xml", CONTAINER_XML)
        archive.writestr("OEBPS/content.opf", CONTENT_OPF)
        archive.writestr("OEBPS/toc.ncx", TOC_NCX)
        archive.writestr("OEBPS/text/ch1.xhtml", CHAPTER_ONE)
        archive.writestr("OEBPS/text/ch2.xhtml", CHAPTER_TWO)
    return path


def make_bookmark(
    bookmark_id="bm-1",
    start="/1/4/2/1:0",
    end="/1/4/2/2/1:5",
    text="Hello world",
    content_id=CONTENT_ID,
    resource="OEBPS/text/ch2.xhtml",
    volume_id="file:///mnt/onboard/Test Book.epub",
    book_title="Test Book",
    date_created="2023-04-01T18:22:31.000",
) -> KoboBookmark:
    return KoboBookmark(
        bookmark_id=bookmark_id,
        volume_id=volume_id,
        content_id=content_id,
        start_container_path=f"{resource}#point({start})",
        end_container_path=f"{resource}#point({end})",
        text=text,
        date_created=date_created,
        book_title=book_title,
        chapter_title="Chapter Two",
    )


@pytest.fixture
def chapter_document():
    return parse_chapter(CHAPTER_TWO)


@pytest.fixture
def library_dir(tmp_path):
    """A Calibre library holding one book with an EPUB and metadata.db"""
    library = tmp_path / "Calibre Library"
    write_epub(library / "Jane Doe" / "Test Book (1)" / "Test Book - Jane Doe.epub")

    conn = sqlite3.connect(library / "metadata.db")
    conn.executescript(
        """
        CREATE TABLE books (
            id INTEGER PRIMARY KEY,
            title TEXT NOT NULL DEFAULT 'Unknown',
            path TEXT NOT NULL DEFAULT ''
        );
        CREATE TABLE annotations (
            id INTEGER PRIMARY KEY,
            book INTEGER NOT NULL,
            format TEXT NOT NULL,
            user_type TEXT NOT NULL,
            user TEXT NOT NULL,
            timestamp REAL NOT NULL,
            annot_id TEXT NOT NULL,
            annot_type TEXT NOT NULL,
            annot_data TEXT NOT NULL,
            searchable_text TEXT NOT NULL DEFAULT '',
            UNIQUE(book, user_type, user, format, annot_type, annot_id)
        );
        INSERT INTO books (id, title, path) VALUES (1, 'Test Book', 'Jane Doe/Test Book (1)');
        INSERT INTO books (id, title, path) VALUES (2, 'Other Book', 'Jane Doe/Other Book (2)');
        """
    )
    conn.commit()
    conn.close()
    return library


def create_kobo_db(db_path: Path, bookmarks) -> Path:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path)
    conn.executescript(
        """
        CREATE TABLE content (
            ContentID TEXT NOT NULL,
            BookTitle TEXT,
            Title TEXT
        );
        CREATE TABLE Bookmark (
            BookmarkID TEXT NOT NULL,
            VolumeID TEXT NOT NULL,
            ContentID TEXT NOT NULL,
            StartContainerPath TEXT NOT NULL,
            EndContainerPath TEXT NOT NULL,
            Text TEXT,
            Annotation TEXT,
            DateCreated TEXT,
            Type TEXT
        );
        """
    )
    content_ids = set()
    for bookmark, kind in bookmarks:
        conn.execute(
            "INSERT INTO Bookmark VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                bookmark.bookmark_id,
                bookmark.volume_id,
                bookmark.content_id,
                bookmark.start_container_path,
                bookmark.end_container_path,
                bookmark.text,
                bookmark.annotation,
                bookmark.date_created,
                kind,
            ),
        )
        if bookmark.content_id not in content_ids:
            content_ids.add(bookmark.content_id)
            conn.execute(
                "INSERT INTO content VALUES (?, ?, ?)",
                (bookmark.content_id, bookmark.book_title, bookmark.chapter_title),
            )
    conn.commit()
    conn.close()
    return db_path


@pytest.fixture
def kobo_volume(tmp_path):
    """A mounted Kobo with three highlights (one unplaceable) and a dogear"""
    volume = tmp_path / "KOBOeReader"
    create_kobo_db(
        volume / ".kobo" / "KoboReader.sqlite",
        [
            (make_bookmark("bm-1"), "highlight"),
            (
                make_bookmark(
                    "bm-2", start="/1/4/3:1", end="/1/4/4/1:30", text=" très bien "
                ),
                "highlight",
            ),
            (
                make_bookmark(
                    "bm-3", start="/1/4/40/1:0", end="/1/4/40/1:4", text="missing"
                ),
                "highlight",
            ),
            (make_bookmark("bm-4", text=""), "dogear"),
        ],
    )
    return volume
