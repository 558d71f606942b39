"""
Cookie context carried between directives.

A ``cookies`` directive holds a base64-encoded ``name=value; name=value``
string copied from the reporting tool's browser session. It is decoded once
into a CookieContext, which then serves both providers: the plain download
sends it as a ``Cookie`` header, the renderer adds one browser cookie per
pair scoped to the host being rendered.
"""

import base64
import binascii
from dataclasses import dataclass, field
from urllib.parse import urlparse


@dataclass(frozen=True)
class CookieContext:
    """Immutable list of (name, value) cookie pairs."""

    pairs: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    @classmethod
    def parse(cls, cookie_string: str) -> "CookieContext":
        """Build a context from a ``name=value; name=value`` string.

        Empty pieces are ignored. A piece without ``=`` becomes a cookie
        with an empty value.
        """
        pairs = []
        for piece in cookie_string.split(";"):
            piece = piece.strip()
            if not piece:
                continue
            name, _, value = piece.partition("=")
            pairs.append((name.strip(), value.strip()))
        return cls(tuple(pairs))

    @classmethod
    def from_blob(cls, encoded_blob: str) -> "CookieContext":
        """Decode a base64 ``cookies`` directive payload.

        Raises:
            ValueError: if the blob is not base64 of UTF-8 text.
        """
        try:
            raw = base64.b64decode(encoded_blob, validate=True)
            text = raw.decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError(f"cookies data is not base64-encoded UTF-8 text: {exc}") from exc
        return cls.parse(text)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    def header(self) -> str:
        """Value for a ``Cookie`` request header."""
        return "; ".join(f"{name}={value}" for name, value in self.pairs)

    def for_url(self, url: str) -> list[dict]:
        """Browser cookies for *url*: one per pair, all on the URL's hostname."""
        domain = urlparse(url).hostname or ""
        return [
            {"name": name, "value": value, "domain": domain, "path": "/"}
            for name, value in self.pairs
        ]
