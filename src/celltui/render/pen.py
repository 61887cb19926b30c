"""Pen state tracking so SGR and OSC 8 codes are only emitted on change."""

from __future__ import annotations

from celltui.core.style import ATTRIBUTE_CODES, DEFAULT_STYLE, Style
from celltui.render.hyperlink import OSC8_END, osc8_start

# SGR codes switching a single attribute off. Bold and dim share 22.
OFF_CODES: dict[str, str] = {
    "italic": "23",
    "underline": "24",
    "blink": "25",
    "reverse": "27",
    "strikethrough": "29",
}

_INTENSITY = frozenset({"bold", "dim"})


class Pen:
    """
    The terminal's current graphic rendition, as last emitted.

    ``transition()`` returns the shortest practical escape string that
    moves the pen to a new style: only attributes and colors that differ
    are emitted, and nothing at all when the style is unchanged.
    """

    def __init__(self) -> None:
        self.style: Style = DEFAULT_STYLE
        self.url = ""
        self.codes_emitted = 0

    def transition(self, style: Style) -> str:
        """Escape codes to switch from the current style to ``style`` (colors and flags)."""
        target = style.without_link()
        current = self.style
        if target == current:
            return ''

        params: list[str] = []
        off = current.attributes() - target.attributes()
        on = target.attributes() - current.attributes()

        if off & _INTENSITY:
            params.append("22")
            on |= target.attributes() & _INTENSITY
        for name, _ in ATTRIBUTE_CODES:
            if name in off and name in OFF_CODES:
                params.append(OFF_CODES[name])
        for name, code in ATTRIBUTE_CODES:
            if name in on:
                params.append(code)

        if target.fg_color != current.fg_color:
            params.append(target.fg_color.to_sgr_fg() if target.fg_color else "39")
        if target.bg_color != current.bg_color:
            params.append(target.bg_color.to_sgr_bg() if target.bg_color else "49")

        self.style = target
        self.codes_emitted += 1
        return f"\x1b[{';'.join(params)}m"

    def link(self, url: str) -> str:
        """OSC 8 codes to switch the active hyperlink target."""
        if url == self.url:
            return ''
        out = ''
        if self.url:
            out += OSC8_END
            self.codes_emitted += 1
        if url:
            out += osc8_start(url)
            self.codes_emitted += 1
        self.url = url
        return out

    def reset(self) -> str:
        """Close any hyperlink and return to the default rendition."""
        out = self.link('')
        if self.style != DEFAULT_STYLE:
            out += '\x1b[0m'
            self.style = DEFAULT_STYLE
            self.codes_emitted += 1
        return out
