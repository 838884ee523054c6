from typing import Tuple

from bs4 import PageElement

from .document import is_text, previous_text_siblings, text_payload


def byte_to_char_offset(text: str, byte_offset: int) -> int:
    """
    Convert a UTF-8 byte offset into ``text`` into a character offset.

    A multi-byte character cut by ``byte_offset`` is not counted.
    """
    if byte_offset <= 0:
        return 0
    head = text.encode("utf-8")[:byte_offset]
    return len(head.decode("utf-8", errors="ignore"))


def merge_text_run(node: PageElement, char_offset: int) -> Tuple[PageElement, int]:
    """
    Re-express ``(node, char_offset)`` relative to the start of its text run.

    Calibre merges adjacent text siblings into a single text span when it
    counts offsets, so the offset must include every text sibling right before
    ``node`` and point at the first of them.
    """
    if not is_text(node):
        return node, char_offset

    effective = node
    offset = char_offset
    for sibling in previous_text_siblings(node):
        offset += len(text_payload(sibling))
        effective = sibling
    return effective, offset


def translate_offset(node: PageElement, byte_offset: int) -> Tuple[PageElement, int]:
    """Turn a Kobo byte offset on ``node`` into Calibre's ``(node, characters)``."""
    if not is_text(node):
        return node, 0
    return merge_text_run(node, byte_to_char_offset(text_payload(node), byte_offset))
