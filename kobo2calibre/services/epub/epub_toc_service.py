import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .epub_path_helper import EPUBPathHelper

logger = logging.getLogger(__name__)


@dataclass
class TocEntry:
    title: str
    href: str
    level: int
    parent: Optional[int] = None  # index into TableOfContents.entries


@dataclass
class TableOfContents:
    """
    Flat arena of TOC entries, each pointing at its parent by index.

    Several entries may point into the same resource (a chapter and its
    sections with #fragments); the entry registered last for a resource wins,
    which is the most deeply nested one in document order.
    """

    entries: List[TocEntry] = field(default_factory=list)
    by_path: Dict[str, int] = field(default_factory=dict)

    def add(self, title: str, href: str, level: int, parent: Optional[int]) -> int:
        self.entries.append(TocEntry(title=title, href=href, level=level, parent=parent))
        index = len(self.entries) - 1
        path = EPUBPathHelper.normalize_resource_path(href)
        if path:
            self.by_path[path] = index
        return index

    def find(self, resource_path: str) -> Optional[int]:
        path = EPUBPathHelper.normalize_resource_path(resource_path)
        if path in self.by_path:
            return self.by_path[path]
        for candidate, index in self.by_path.items():
            if EPUBPathHelper.paths_match(candidate, path):
                return index
        return None

    def breadcrumb(self, resource_path: str) -> List[str]:
        """Titles from the outermost TOC entry down to the one for ``resource_path``."""
        titles: List[str] = []
        index = self.find(resource_path)
        while index is not None:
            entry = self.entries[index]
            titles.insert(0, entry.title)
            index = entry.parent
        return titles


class EPUBTocService:
    """Responsible for reading the table of contents of EPUB files."""

    def build_table_of_contents(self, book) -> TableOfContents:
        toc = TableOfContents()
        if hasattr(book, "toc") and book.toc:
            self._process_toc_items(book.toc, toc)
        else:
            logger.info("EPUB has no table of contents, breadcrumbs will be empty")
        return toc

    def _process_toc_items(self, toc_items, toc: TableOfContents, parent=None, level=1):
        """
        Recursively register table of contents items
        """
        for item in toc_items:
            if isinstance(item, tuple):
                # This is a nested section
                section, children = item
                index = parent
                if hasattr(section, "title") and getattr(section, "href", None):
                    index = toc.add(str(section.title), section.href, level, parent)
                self._process_toc_items(children, toc, index, level + 1)
            elif isinstance(item, list):
                self._process_toc_items(item, toc, parent, level)
            elif hasattr(item, "title") and getattr(item, "href", None):
                # This is a direct navigation item
                toc.add(str(item.title), item.href, level, parent)
