"""RFC 5988 `Link` header parsing.

GitHub paginates list endpoints by returning a header such as::

    <https://api.github.com/user/repos?page=2>; rel="next",
    <https://api.github.com/user/repos?page=5>; rel="last"

`parse_link_header` turns that into ``{"next": ..., "last": ...}``.
"""
from __future__ import annotations
from typing import Dict, Optional
import re

_PARAM_RE = re.compile(r'^\s*([A-Za-z0-9_\-*]+)\s*=\s*"?([^"]*)"?\s*$')


def _split_links(value: str):
    # commas may appear inside <...>, so only split outside angle brackets
    depth = 0
    start = 0
    for i, ch in enumerate(value):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(depth - 1, 0)
        elif ch == "," and depth == 0:
            yield value[start:i]
            start = i + 1
    yield value[start:]


def parse_link_header(value: Optional[str]) -> Dict[str, str]:
    """Parse a `Link` header into a mapping of relation name to URL.

    Args:
        value: Raw header value, or None when the response had no header.

    Returns:
        Dictionary keyed by relation (``next``, ``prev``, ``first``, ``last``).
        Segments without a ``<url>`` or a ``rel`` parameter are skipped. A
        link listing several relations (``rel="next last"``) is registered
        under each of them.
    """
    links: Dict[str, str] = {}
    if not value:
        return links
    for segment in _split_links(value):
        segment = segment.strip()
        if not segment.startswith("<") or ">" not in segment:
            continue
        url, _, params = segment[1:].partition(">")
        url = url.strip()
        for param in params.split(";"):
            m = _PARAM_RE.match(param)
            if not m or m.group(1).lower() != "rel":
                continue
            for rel in m.group(2).split():
                links.setdefault(rel.lower(), url)
    return links


def next_link(value: Optional[str]) -> Optional[str]:
    """Return the ``rel="next"`` URL from a `Link` header, if any."""
    return parse_link_header(value).get("next")
