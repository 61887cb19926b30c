"""OSC 8 hyperlinks."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from urllib.parse import urlparse

from celltui.core.style import Color, Style

OSC8_END = '\x1b]8;;\x1b\\'


def is_control(char: str) -> bool:
    """C0, DEL or C1 control character."""
    code = ord(char)
    return code < 0x20 or 0x7f <= code <= 0x9f


def osc8_start(url: str) -> str:
    """
    Escape sequence opening a hyperlink: ESC ] 8 ; ; URL ESC \\

    Control characters are dropped from the URL so it cannot end the
    sequence early.
    """
    url = "".join(c for c in url if not is_control(c))
    return f'\x1b]8;;{url}\x1b\\'


@dataclass(frozen=True)
class Hyperlink:
    """
    A clickable link in terminals that support OSC 8.

    Terminals without support ignore the escape codes and show only the
    text; ``fallback_text()`` renders ``text (url)`` for those callers that
    want the target visible.
    """
    url: str
    text: str
    style: Style = field(default_factory=lambda: Style().underline().fg(Color.BLUE))

    def with_style(self, style: Style) -> "Hyperlink":
        return replace(self, style=style)

    def validate(self) -> None:
        """Raise ValueError if the link cannot be rendered."""
        if not self.url:
            raise ValueError("hyperlink URL cannot be empty")
        if not self.text:
            raise ValueError("hyperlink text cannot be empty")
        if not urlparse(self.url).scheme:
            raise ValueError(f"hyperlink URL has no scheme: {self.url!r}")
        if any(is_control(c) for c in self.url):
            raise ValueError("hyperlink URL contains control characters")

    def format(self) -> str:
        """Standalone OSC 8 string for line-oriented output."""
        return f"{osc8_start(self.url)}{self.style.without_link().apply(self.text)}{OSC8_END}"

    def fallback_text(self) -> str:
        return f"{self.text} ({self.url})"
