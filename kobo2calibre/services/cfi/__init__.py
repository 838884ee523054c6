# Positional path (CFI) translation components
from .document import parse_chapter
from .offsets import byte_to_char_offset, merge_text_run, translate_offset
from .pointer import (
    ParsedPointer,
    Resolution,
    container_resource,
    extract_point_expression,
    generate,
    parse_pointer,
    resolve,
)
from .text_window import TextMatch, TextWindow

__all__ = [
    "parse_chapter",
    "byte_to_char_offset",
    "merge_text_run",
    "translate_offset",
    "ParsedPointer",
    "Resolution",
    "container_resource",
    "extract_point_expression",
    "generate",
    "parse_pointer",
    "resolve",
    "TextMatch",
    "TextWindow",
]
