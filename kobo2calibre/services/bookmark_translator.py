"""
Bookmark Translator Module

Turns one Kobo highlight bookmark into a Calibre highlight for a parsed
chapter document.

Kobo stores highlight boundaries as CFI-like paths with UTF-8 *byte* offsets
and a bogus ``/1/`` root step, e.g. ``/1/4/78/1:586``. Calibre wants
character offsets, a ``/2/`` root, and counts adjacent text nodes as one.
Two strategies are tried in order:

1. precise: resolve the start node, then search the highlighted text around it
   and rebuild both boundaries from where the text was actually found;
2. fallback: translate each Kobo boundary on its own (bytes to characters,
   merged text runs), trusting Kobo's node choice.

The precise strategy copes with the places where Kobo and Calibre disagree on
which node holds a boundary; the fallback keeps highlights whose text no
longer matches (e.g. edited books) at roughly the right place.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

from bs4 import BeautifulSoup, PageElement

from ..exceptions import (
    MalformedContentIdError,
    MalformedTimestampError,
    TranslationError,
    UnresolvedEndpointError,
)
from ..models.calibre_annotation import CalibreHighlight, HighlightStyle
from ..models.kobo_bookmark import KoboBookmark
from ..models.translation import (
    TranslationFailure,
    TranslationOutcome,
    TranslationSuccess,
    TranslationTier,
)
from .cfi import (
    ParsedPointer,
    TextWindow,
    byte_to_char_offset,
    extract_point_expression,
    generate,
    merge_text_run,
    parse_pointer,
    resolve,
    translate_offset,
)
from .cfi.document import is_text, text_payload

logger = logging.getLogger(__name__)

_CONTENT_ID_RE = re.compile(r"#\((\d+)\)([^#]*)(?:#(.*))?$")


@dataclass
class SpineLocation:
    index: int
    name: str
    toc_fragment: Optional[str] = None


def parse_content_id(content_id: str) -> SpineLocation:
    """
    Get the spine index and resource name out of a Kobo content id.

        file:///mnt/onboard/book.epub#(54)OEBPS/cha42.xhtml
        -> SpineLocation(index=54, name="OEBPS/cha42.xhtml")

    A trailing ``#fragment`` naming a TOC anchor is kept apart from the name.
    """
    match = _CONTENT_ID_RE.search(content_id or "")
    if not match or not match.group(2):
        raise MalformedContentIdError(content_id)
    return SpineLocation(
        index=int(match.group(1)),
        name=match.group(2),
        toc_fragment=match.group(3) or None,
    )


def _parse_date_created(value: str) -> datetime:
    raw = (value or "").strip()
    if raw.endswith("Z"):
        raw = raw[:-1]
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise MalformedTimestampError(value) from exc
    if parsed.tzinfo is None:
        # Kobo writes UTC without saying so
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_epoch_seconds(date_created: str) -> float:
    return _parse_date_created(date_created).timestamp()


def to_calibre_timestamp(date_created: str) -> str:
    _parse_date_created(date_created)
    raw = date_created.strip()
    return raw if raw.endswith("Z") else raw + "Z"


class BookmarkTranslator:
    """Translate Kobo bookmarks of a single chapter document."""

    def __init__(self, style: Optional[HighlightStyle] = None):
        self.style = style or HighlightStyle()

    def translate(
        self, document: BeautifulSoup, bookmark: KoboBookmark
    ) -> Tuple[CalibreHighlight, TranslationTier]:
        """
        Build the Calibre highlight for ``bookmark``.

        Raises:
            TranslationError: malformed bookmark data, or an endpoint that
                neither strategy could place.
        """
        spine = parse_content_id(bookmark.content_id)
        start_expression = extract_point_expression(bookmark.start_container_path)
        end_expression = extract_point_expression(bookmark.end_container_path)
        start = parse_pointer(start_expression)
        end = parse_pointer(end_expression)

        text = bookmark.text
        precise = self._precise_boundaries(document, start, text)

        if precise is not None:
            start_cfi, end_cfi = precise
            text = text.strip()
            tier = TranslationTier.PRECISE
        else:
            logger.debug(
                f"Text of bookmark {bookmark.bookmark_id} not found, "
                "translating offsets directly"
            )
            start_cfi = self._fallback_boundary(
                document, start, bookmark.bookmark_id, "start", start_expression
            )
            end_cfi = self._fallback_boundary(
                document, end, bookmark.bookmark_id, "end", end_expression
            )
            tier = TranslationTier.FALLBACK

        highlight = CalibreHighlight(
            highlighted_text=text,
            spine_index=spine.index,
            spine_name=spine.name,
            start_cfi=start_cfi,
            end_cfi=end_cfi,
            style=self.style.model_copy(),
            timestamp=to_calibre_timestamp(bookmark.date_created),
            uuid=bookmark.bookmark_id,
            epoch_timestamp=to_epoch_seconds(bookmark.date_created),
        )
        return highlight, tier

    def translate_outcome(
        self, document: BeautifulSoup, bookmark: KoboBookmark
    ) -> TranslationOutcome:
        """Like ``translate`` but reports failures as an outcome instead of raising."""
        try:
            highlight, tier = self.translate(document, bookmark)
        except UnresolvedEndpointError as exc:
            logger.warning(str(exc))
            return TranslationFailure(
                bookmark_id=bookmark.bookmark_id,
                reason=f"could not resolve {exc.expression}",
                endpoint=exc.endpoint,
            )
        except TranslationError as exc:
            logger.warning(f"Skipping bookmark {bookmark.bookmark_id}: {exc}")
            return TranslationFailure(bookmark_id=bookmark.bookmark_id, reason=str(exc))
        return TranslationSuccess(highlight=highlight, tier=tier)

    def _precise_boundaries(
        self, document: BeautifulSoup, start: ParsedPointer, text: str
    ) -> Optional[Tuple[str, str]]:
        resolution = resolve(document, ParsedPointer(steps=list(start.steps)))
        if resolution is None:
            return None

        window = TextWindow.around(resolution.node)
        if window is None:
            return None

        match = window.search(text, anchor=self._start_anchor(document, start))
        if match is None:
            return None

        start_node, start_offset = merge_text_run(*window.locate(match.start))
        # The end boundary sits on the last highlighted character
        end_node, end_offset = merge_text_run(*window.locate(match.end - 1))
        return generate(start_node, start_offset), generate(end_node, end_offset)

    def _start_anchor(
        self, document: BeautifulSoup, start: ParsedPointer
    ) -> Optional[Tuple[PageElement, int]]:
        """Where Kobo claims the highlight starts, in characters of that node."""
        resolution = resolve(document, start)
        if resolution is None or not is_text(resolution.node):
            return None
        payload = text_payload(resolution.node)
        return resolution.node, byte_to_char_offset(payload, resolution.offset)

    def _fallback_boundary(
        self,
        document: BeautifulSoup,
        pointer: ParsedPointer,
        bookmark_id: str,
        endpoint: str,
        expression: str,
    ) -> str:
        resolution = resolve(document, pointer)
        if resolution is None:
            raise UnresolvedEndpointError(bookmark_id, endpoint, expression)
        node, offset = translate_offset(resolution.node, resolution.offset)
        return generate(node, offset)
