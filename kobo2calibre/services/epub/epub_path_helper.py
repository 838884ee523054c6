"""
Path helper utilities for EPUB resources
Centralizes normalization and matching of resource paths coming from Kobo,
from the OPF manifest and from the table of contents
"""

import urllib.parse


class EPUBPathHelper:
    """Centralized handling of resource paths inside an EPUB"""

    @staticmethod
    def normalize_resource_path(path: str) -> str:
        """
        Normalize a resource path so paths from different sources compare equal

        Args:
            path: Raw path, possibly URL-encoded and carrying a #fragment

        Returns:
            Decoded path without fragment, leading "./" or slashes
        """
        if not path:
            return ""

        base = path.strip().split("#", 1)[0]
        base = urllib.parse.unquote(base)

        while base.startswith("./"):
            base = base[2:]

        return base.lstrip("/").replace("\\", "/")

    @staticmethod
    def paths_match(first: str, second: str) -> bool:
        """
        Check whether two resource paths name the same file.

        Kobo paths are relative to the archive root ("OEBPS/text/ch1.xhtml")
        while manifest and TOC paths are relative to the OPF or NCX file
        ("text/ch1.xhtml"), so a match on whole trailing path segments is
        accepted.
        """
        a = EPUBPathHelper.normalize_resource_path(first)
        b = EPUBPathHelper.normalize_resource_path(second)

        if not a or not b:
            return False
        if a == b:
            return True
        return a.endswith("/" + b) or b.endswith("/" + a)
