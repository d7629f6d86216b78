"""Search term highlighting with ``<mark>`` markers.

The search service attaches ``highlight()`` output to every search result.
The other helpers are for consumers of that output: ``strip_highlights`` and
``count_highlights`` read it back, and ``sanitize_highlighted`` turns it into
HTML that is safe to render.

Note text may itself contain ``<mark>`` or ``</mark>``. Such literal tags are
escaped as ``&lt;mark>`` / ``&lt;/mark>`` (and an existing ``&lt;mark>`` gains
one more ``amp;``), so every real marker in the output came from a match and
stripping recovers the exact input.
"""

import html
import re
from typing import Optional

from gravity.constants.search import HIGHLIGHT_CLOSE, HIGHLIGHT_OPEN

_LITERAL_OR_ESCAPED_TAG = re.compile(r"<(/?mark>)|&((?:amp;)*)lt;(/?mark>)")
_MARKER_OR_ESCAPED_TAG = re.compile(r"<(/?)mark>|&((?:amp;)*)lt;(/?mark>)")
_MARKER_SPLIT = re.compile(f"({re.escape(HIGHLIGHT_OPEN)}|{re.escape(HIGHLIGHT_CLOSE)})")


def _escape_match(match: re.Match) -> str:
    if match.group(1) is not None:
        return f"&lt;{match.group(1)}"
    return f"&amp;{match.group(2)}lt;{match.group(3)}"


def _escape_tags(text: str) -> str:
    return _LITERAL_OR_ESCAPED_TAG.sub(_escape_match, text)


def _unescape_match(match: re.Match) -> str:
    if match.group(1) is not None:
        # A real marker
        return ""
    # Drop one escape level
    amps = match.group(2)
    if amps:
        return f"&{amps[len('amp;'):]}lt;{match.group(3)}"
    return f"<{match.group(3)}"


def highlight(text: Optional[str], query: str) -> Optional[str]:
    """Wrap every case-insensitive occurrence of ``query`` in mark tags.

    The query is matched as literal text against the original ``text``.
    Matches never overlap and keep their original casing. ``None`` or empty
    text is returned unchanged; an empty query adds no markers.
    """
    if not text:
        return text
    if not query:
        return _escape_tags(text)

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    parts = []
    last = 0
    for match in pattern.finditer(text):
        parts.append(_escape_tags(text[last : match.start()]))
        parts.append(f"{HIGHLIGHT_OPEN}{_escape_tags(match.group(0))}{HIGHLIGHT_CLOSE}")
        last = match.end()
    parts.append(_escape_tags(text[last:]))
    return "".join(parts)


def strip_highlights(text: Optional[str]) -> str:
    """Remove mark tags, recovering the plain text."""
    if not text:
        return ""
    return _MARKER_OR_ESCAPED_TAG.sub(_unescape_match, text)


def count_highlights(text: Optional[str]) -> int:
    """Count highlighted terms."""
    if not text:
        return 0
    return text.count(HIGHLIGHT_OPEN)


def sanitize_highlighted(text: Optional[str]) -> str:
    """Render highlighter output as HTML.

    Real markers stay as ``<mark>`` elements; everything else, literal tags
    from the note included, is HTML-escaped.
    """
    if not text:
        return ""
    pieces = []
    for piece in _MARKER_SPLIT.split(text):
        if piece in (HIGHLIGHT_OPEN, HIGHLIGHT_CLOSE):
            pieces.append(piece)
        else:
            pieces.append(html.escape(strip_highlights(piece), quote=True))
    return "".join(pieces)
