"""
Read-only navigation helpers over a parsed chapter document.

Chapters are parsed with BeautifulSoup. Three kinds of nodes matter to the
positional path scheme:

- elements (``Tag``) take the even positions among their siblings,
- text-like nodes (plain ``NavigableString`` and ``CData``) fill the odd,
  virtual positions between elements,
- everything else (comments, processing instructions, doctypes) is ignorable:
  it is never addressed and never splits a run of text.
"""

from typing import Iterator, List, Optional

from bs4 import BeautifulSoup, CData, NavigableString, PageElement, Tag
from bs4.element import PreformattedString


def parse_chapter(content) -> BeautifulSoup:
    """Parse chapter (X)HTML bytes or text into a document tree."""
    return BeautifulSoup(content, "html.parser")


def is_element(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_text(node: Optional[PageElement]) -> bool:
    if not isinstance(node, NavigableString):
        return False
    # Comment, Doctype, ProcessingInstruction... are NavigableString subclasses too
    return isinstance(node, CData) or not isinstance(node, PreformattedString)


def is_document(node: Optional[PageElement]) -> bool:
    return isinstance(node, BeautifulSoup)


def text_payload(node: PageElement) -> str:
    return str(node) if is_text(node) else ""


def children(node: PageElement) -> List[PageElement]:
    return list(node.contents) if isinstance(node, Tag) else []


def element_children(node: PageElement) -> List[Tag]:
    return [child for child in children(node) if is_element(child)]


def text_slot(node: PageElement, slot: int) -> List[NavigableString]:
    """
    Return the text-like children lying in virtual slot ``slot`` of ``node``.

    Slot 0 holds the text before the first child element, slot 1 the text
    between the first and second child elements, and so on.
    """
    found = []
    elements_seen = 0
    for child in children(node):
        if is_element(child):
            elements_seen += 1
            if elements_seen > slot:
                break
        elif elements_seen == slot and is_text(child):
            found.append(child)
    return found


def previous_text_siblings(node: PageElement) -> Iterator[NavigableString]:
    """Yield the text-like siblings directly before ``node``, nearest first."""
    sibling = node.previous_sibling
    while sibling is not None and not is_element(sibling):
        if is_text(sibling):
            yield sibling
        sibling = sibling.previous_sibling


def _descend(node: PageElement, forward: bool) -> PageElement:
    while isinstance(node, Tag) and node.contents:
        node = node.contents[0] if forward else node.contents[-1]
    return node


def _step(node: PageElement, forward: bool) -> Optional[PageElement]:
    """
    Move to the next (or previous) leaf in document order, or None when that
    would leave the document element.
    """
    while True:
        if node.parent is None or is_document(node.parent):
            return None
        sibling = node.next_sibling if forward else node.previous_sibling
        if sibling is not None:
            return _descend(sibling, forward)
        node = node.parent


def next_text_node(node: PageElement) -> Optional[NavigableString]:
    """Return the first text-like node strictly after ``node`` in document order."""
    current = _step(node, forward=True)
    while current is not None and not is_text(current):
        current = _step(current, forward=True)
    return current


def previous_text_node(node: PageElement) -> Optional[NavigableString]:
    """Return the last text-like node strictly before ``node`` in document order."""
    current = _step(node, forward=False)
    while current is not None and not is_text(current):
        current = _step(current, forward=False)
    return current


def first_text_at_or_after(node: PageElement) -> Optional[NavigableString]:
    """
    Return ``node`` itself if it is text-like, otherwise the nearest text-like
    node going right in document order: first inside ``node``, then after it.
    """
    if is_text(node):
        return node
    leaf = _descend(node, forward=True)
    if is_text(leaf):
        return leaf
    return next_text_node(leaf)
