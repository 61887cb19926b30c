"""Text utilities - measuring display width and truncating by cells."""

from __future__ import annotations

import re
import unicodedata
from typing import Iterator

# Pattern to match ANSI escape sequences (including ~ terminator for F-keys, etc.)
_ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z~]|\x1b\][^\x1b\x07]*(?:\x07|\x1b\\)')

_ZERO_WIDTH = {'​', '‌', '‍', '⁠', '︎', '️'}


def strip_ansi(s: str) -> str:
    """Remove CSI and OSC escape sequences."""
    return _ANSI_ESCAPE.sub('', s)


def char_width(ch: str) -> int:
    """
    Number of terminal columns a single code point occupies.

    Returns 0 for combining marks, zero-width joiners and control
    characters, 2 for East Asian wide/fullwidth characters, 1 otherwise.
    """
    if ch in _ZERO_WIDTH:
        return 0
    code = ord(ch)
    if code < 0x20 or 0x7f <= code < 0xa0:
        return 0
    if unicodedata.combining(ch):
        return 0
    category = unicodedata.category(ch)
    if category in ('Mn', 'Me', 'Cf'):
        return 0
    if unicodedata.east_asian_width(ch) in ('W', 'F'):
        return 2
    return 1


def graphemes(text: str) -> Iterator[tuple[str, int]]:
    """
    Split text into (cluster, width) pairs.

    Zero-width code points attach to the preceding cluster. A leading
    zero-width code point with nothing to attach to is dropped, and so
    are control characters.
    """
    cluster = ''
    width = 0
    joining = False
    for ch in text:
        if ch < ' ' or '\x7f' <= ch < '\xa0':
            continue
        w = char_width(ch)
        if w == 0 or joining:
            if cluster:
                cluster += ch
                joining = ch == '‍'
            continue
        if cluster:
            yield cluster, width
        cluster, width = ch, w
    if cluster:
        yield cluster, width


def text_width(s: str) -> int:
    """Visible width of a string in cells, ignoring escape codes."""
    return sum(w for _, w in graphemes(strip_ansi(s)))


def truncate(s: str, max_width: int) -> str:
    """
    Truncate a plain string to at most max_width cells.

    A wide character that would straddle the limit is dropped.
    """
    if max_width <= 0:
        return ""
    out: list[str] = []
    used = 0
    for cluster, w in graphemes(s):
        if used + w > max_width:
            break
        out.append(cluster)
        used += w
    return ''.join(out)


def pad_to_width(s: str, width: int, char: str = ' ') -> str:
    """Pad string with char to reach exactly width visible cells."""
    current = text_width(s)
    if current >= width:
        return s
    return s + char * (width - current)


def truncate_and_pad(s: str, width: int) -> str:
    """Truncate if too long, pad if too short. Always returns exactly width cells."""
    return pad_to_width(truncate(s, width), width)
