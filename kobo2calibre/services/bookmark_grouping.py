"""
Grouping of Kobo bookmark rows by book (volume) and by chapter (content id).

Groups keep the order in which their first bookmark was seen, and bookmarks
keep their original order inside a group.
"""

from typing import Dict, Iterable, List

from ..models.kobo_bookmark import KoboBookmark, KoboChapter, KoboVolume
from .cfi import container_resource


def group_by_volume(bookmarks: Iterable[KoboBookmark]) -> List[KoboVolume]:
    index: Dict[str, List[KoboBookmark]] = {}
    for bookmark in bookmarks:
        index.setdefault(bookmark.volume_id, []).append(bookmark)

    return [
        KoboVolume(id=volume_id, title=items[0].book_title, bookmarks=items)
        for volume_id, items in index.items()
    ]


def group_by_chapter(bookmarks: Iterable[KoboBookmark]) -> List[KoboChapter]:
    index: Dict[str, List[KoboBookmark]] = {}
    for bookmark in bookmarks:
        index.setdefault(bookmark.content_id, []).append(bookmark)

    return [
        KoboChapter(
            id=content_id,
            title=items[0].chapter_title,
            path=container_resource(items[0].start_container_path),
            bookmarks=items,
        )
        for content_id, items in index.items()
    ]
