"""User-name normalization shared by the user directory and the merge engine."""

from __future__ import annotations

import unicodedata


class UserNameNormalizer:
    """Normalize principal names to the form stored in the user directory.

    Names are NFKC-normalized, trimmed, and case-folded. A Windows-style
    ``DOMAIN\\user`` prefix is dropped when ``strip_domain`` is set.
    """

    def __init__(self, *, strip_domain: bool = True) -> None:
        self.strip_domain = strip_domain

    def normalize(self, user_name: str) -> str:
        text = unicodedata.normalize("NFKC", user_name).strip()
        if self.strip_domain and "\\" in text:
            text = text.rsplit("\\", 1)[1].strip()
        return text.casefold()
