"""
Exceptions raised while translating Kobo bookmarks into Calibre highlights.

Every error here concerns a single bookmark: callers turn them into a
``TranslationFailure`` outcome and move on to the next bookmark.
"""


class TranslationError(Exception):
    """Base class for per-bookmark translation errors."""


class MalformedPointerError(TranslationError):
    """A positional path or Kobo container path does not follow the grammar."""

    def __init__(self, expression: str, reason: str = "invalid syntax"):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Malformed positional path {expression!r}: {reason}")


class MalformedContentIdError(TranslationError):
    """A Kobo content identifier carries no ``#(<index>)<resource>`` spine part."""

    def __init__(self, content_id: str):
        self.content_id = content_id
        super().__init__(f"Malformed content identifier: {content_id!r}")


class UnresolvedEndpointError(TranslationError):
    """Neither translation tier could place one end of a highlight."""

    def __init__(self, bookmark_id: str, endpoint: str, expression: str):
        self.bookmark_id = bookmark_id
        self.endpoint = endpoint
        self.expression = expression
        super().__init__(
            f"Could not resolve {endpoint} of bookmark {bookmark_id} ({expression})"
        )


class MalformedTimestampError(TranslationError):
    """A Kobo ``DateCreated`` value is not an ISO date and time."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Malformed creation timestamp: {value!r}")
