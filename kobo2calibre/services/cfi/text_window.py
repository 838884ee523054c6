"""
Text window used to recover highlight boundaries by searching for the text.

Kobo paths regularly point at a text node that does not contain the
highlight: inline markup splits sentences into many nodes, and Kobo likes to
target the empty whitespace node between two paragraphs. Starting from the
node a path resolves to, the window grabs neighbouring text nodes in both
directions until the highlighted text shows up in their concatenation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bs4 import NavigableString, PageElement

from .document import (
    first_text_at_or_after,
    next_text_node,
    previous_text_node,
    text_payload,
)

logger = logging.getLogger(__name__)


@dataclass
class TextMatch:
    """Where a searched text starts and ends, as indices into the window text."""

    start: int
    end: int  # exclusive


@dataclass
class TextWindow:
    nodes: List[NavigableString] = field(default_factory=list)
    text: str = ""
    left_exhausted: bool = False
    right_exhausted: bool = False

    @classmethod
    def around(cls, node: PageElement) -> Optional["TextWindow"]:
        """Seed a window at ``node``, moving right to text if it is an element."""
        seed = first_text_at_or_after(node)
        if seed is None:
            return None
        return cls(nodes=[seed], text=text_payload(seed))

    @property
    def fully_expanded(self) -> bool:
        return self.left_exhausted and self.right_exhausted

    def grow_right(self) -> bool:
        if self.right_exhausted:
            return False
        found = next_text_node(self.nodes[-1])
        if found is None:
            self.right_exhausted = True
            return False
        self.nodes.append(found)
        self.text += text_payload(found)
        return True

    def grow_left(self) -> bool:
        if self.left_exhausted:
            return False
        found = previous_text_node(self.nodes[0])
        if found is None:
            self.left_exhausted = True
            return False
        self.nodes.insert(0, found)
        self.text = text_payload(found) + self.text
        return True

    def expand(self) -> bool:
        """Grow one node on each side that still can. False once nothing grew."""
        grew_right = self.grow_right()
        grew_left = self.grow_left()
        return grew_right or grew_left

    def start_of(self, node: PageElement) -> Optional[int]:
        """Index of ``node``'s first character in the window text, or None."""
        index = 0
        for candidate in self.nodes:
            if candidate is node:
                return index
            index += len(text_payload(candidate))
        return None

    def search(
        self, target: str, anchor: Optional[Tuple[PageElement, int]] = None
    ) -> Optional[TextMatch]:
        """
        Expand until ``target`` (trimmed) appears in the window text.

        ``anchor`` is a ``(node, character offset)`` where the text is expected
        to start. When the text occurs more than once, the occurrence closest
        to the anchor wins; without one the leftmost occurrence is used.

        Returns None when the window is fully expanded without a match. An
        empty target never matches.
        """
        needle = (target or "").strip()
        if not needle:
            return None

        iterations = 0
        while True:
            index = self._closest_occurrence(needle, anchor)
            if index is not None:
                logger.debug(
                    f"Found text after {iterations} expansions over {len(self.nodes)} nodes"
                )
                return TextMatch(start=index, end=index + len(needle))
            if self.fully_expanded:
                logger.debug(f"Text not found in {len(self.nodes)} nodes")
                return None
            self.expand()
            iterations += 1

    def _closest_occurrence(
        self, needle: str, anchor: Optional[Tuple[PageElement, int]]
    ) -> Optional[int]:
        index = self.text.find(needle)
        if index == -1:
            return None
        hint = self.start_of(anchor[0]) if anchor is not None else None
        if hint is None:
            return index
        hint += anchor[1]

        best = index
        while index != -1:
            if abs(index - hint) < abs(best - hint):
                best = index
            index = self.text.find(needle, index + 1)
        return best

    def locate(self, index: int) -> Tuple[NavigableString, int]:
        """
        Map an index of the window text back to ``(node, offset in node)``.

        An index falling exactly on a node's end belongs to the next node.
        """
        remaining = index
        for node in self.nodes:
            length = len(text_payload(node))
            if remaining < length:
                return node, remaining
            remaining -= length
        # Past the end: clamp to the end of the last node
        last = self.nodes[-1]
        return last, len(text_payload(last))
