from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w\-]+", re.ASCII)
_MULTI_HYPHEN_RE = re.compile(r"-{2,}")


def slugify(text: object) -> str:
    """Turn arbitrary text into a URL-safe Shopify handle.

    Lowercases, turns whitespace runs into hyphens, drops anything that is not
    an ASCII word character or hyphen, collapses repeated hyphens and trims
    hyphens from both ends. May return an empty string.

    >>> slugify("Men's Blue T-Shirt!")
    'mens-blue-t-shirt'
    """
    value = str(text).lower().strip()
    value = _WHITESPACE_RE.sub("-", value)
    value = _NON_WORD_RE.sub("", value)
    value = _MULTI_HYPHEN_RE.sub("-", value)
    return value.strip("-")
