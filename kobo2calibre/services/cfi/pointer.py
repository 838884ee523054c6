"""
Positional path parsing, resolution and generation.

A positional path is a list of steps from the document down to a node, using
the EPUB CFI interleaving: even steps pick the n-th child element (2 is the
first), odd steps pick the text lying before, between or after child elements
(1 is the text before the first element). An optional ``:<offset>`` qualifies
the last step.

Kobo writes paths starting with ``/1/`` which cannot address anything (the
document element is an element, hence even); Calibre expects ``/2/``. Paths
are normalized on the way in and always generated with a root step of 2.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

import epubcfi
from bs4 import BeautifulSoup, PageElement

from ...exceptions import MalformedPointerError
from .document import (
    children,
    element_children,
    is_document,
    is_element,
    is_text,
    text_slot,
)

ROOT_STEP = 2

_POINT_EXPRESSION_RE = re.compile(r"#point\(([^()]*)\)")


@dataclass
class ParsedPointer:
    steps: List[int] = field(default_factory=list)
    offset: Optional[int] = None

    def __str__(self) -> str:
        path = "".join(f"/{step}" for step in self.steps)
        return path if self.offset is None else f"{path}:{self.offset}"


@dataclass
class Resolution:
    """A node found by walking a path, with the offset left for that node."""

    node: PageElement
    offset: int = 0


def extract_point_expression(container_path: str) -> str:
    """
    Pull the positional path out of a Kobo container path.

        text/part0013.html#point(/1/4/78/1:586)  ->  /1/4/78/1:586
    """
    match = _POINT_EXPRESSION_RE.search(container_path or "")
    if not match:
        raise MalformedPointerError(container_path, "no #point(...) expression")
    return match.group(1)


def container_resource(container_path: str) -> str:
    """Return the chapter resource a Kobo container path points into."""
    return (container_path or "").split("#", 1)[0]


def parse_pointer(expression: str) -> ParsedPointer:
    """
    Parse ``/2/4/78/1:584`` style paths; the root step is normalized to 2.

    The path is handed to ``epubcfi`` as a CFI. Only plain steps and a
    character offset are accepted: indirections, assertions and anything the
    parser would silently rewrite are rejected.
    """
    raw = (expression or "").strip()
    try:
        parsed = epubcfi.parse(f"epubcfi({raw})")
    except Exception as exc:
        raise MalformedPointerError(expression, str(exc) or "invalid syntax") from exc

    try:
        steps = [_step_index(expression, step) for step in parsed.steps]
        offset = int(parsed.offset.value) if parsed.offset is not None else None
    except (AttributeError, TypeError, ValueError) as exc:
        raise MalformedPointerError(expression, str(exc)) from exc

    pointer = ParsedPointer(steps=steps, offset=offset)
    if not steps or str(pointer) != raw:
        raise MalformedPointerError(expression)

    if pointer.steps[0] == 1:
        pointer.steps[0] = ROOT_STEP
    return pointer


def _step_index(expression: str, step) -> int:
    if not isinstance(step, epubcfi.cfi.Step):
        raise MalformedPointerError(expression, "indirections are not supported")
    return int(step.index)


def resolve(document: BeautifulSoup, pointer: ParsedPointer) -> Optional[Resolution]:
    """
    Walk ``pointer`` from the document and return the node it addresses.

    The offset is only used on the final step: when that step is odd, its
    virtual slot may hold several text nodes and the (byte) offset decides
    which one is meant. Returns None when any step addresses a position that
    does not exist.
    """
    node: PageElement = document
    last = len(pointer.steps) - 1

    for position, step in enumerate(pointer.steps):
        if step == 0:
            return None
        # Only the document element is addressable at the top level
        if position == 0 and step % 2 == 1:
            return None

        if step % 2 == 0:
            elements = element_children(node)
            index = step // 2 - 1
            if index >= len(elements):
                return None
            node = elements[index]
            continue

        # Text cannot have children, so an odd step must be the last one
        if position != last:
            return None

        slot = text_slot(node, step // 2)
        if not slot:
            return None
        if pointer.offset is None:
            return Resolution(slot[0], 0)
        return _land_in_slot(slot, pointer.offset)

    return Resolution(node, pointer.offset or 0)


def _land_in_slot(slot, byte_offset: int) -> Resolution:
    remaining = byte_offset
    for node in slot[:-1]:
        length = len(str(node).encode("utf-8"))
        if remaining <= length:
            return Resolution(node, remaining)
        remaining -= length
    return Resolution(slot[-1], remaining)


def node_steps(node: PageElement) -> List[int]:
    """Compute the interleaved steps leading from the document to ``node``."""
    top = node
    while top.parent is not None and not is_document(top.parent):
        top = top.parent
    if not is_element(top):
        raise ValueError("Only nodes inside the document element have a path")

    steps: List[int] = []
    current = node

    while current is not None and current.parent is not None:
        elements_before = 0
        for sibling in children(current.parent):
            if sibling is current:
                break
            if is_element(sibling):
                elements_before += 1

        if is_element(current):
            steps.append(2 * (elements_before + 1))
        else:
            steps.append(2 * elements_before + 1)
        current = current.parent

    steps.reverse()
    if steps:
        steps[0] = ROOT_STEP
    return steps


def generate(node: PageElement, offset: int = 0) -> str:
    """Emit the canonical path for ``node`` with a character ``offset``."""
    pointer = ParsedPointer(steps=node_steps(node))
    if offset or is_text(node):
        pointer.offset = offset
    return str(pointer)
