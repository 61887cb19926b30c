"""Runtime configuration with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

ENV_PREFIX = "CELLTUI_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}

# suffix -> (field, divisor)
_INT_VARS = {
    "FPS": ("fps", 1),
    "ESCAPE_TIMEOUT_MS": ("escape_timeout", 1000),
    "PASTE_TAB_WIDTH": ("paste_tab_width", 1),
}


@dataclass(frozen=True)
class RuntimeConfig:
    """Settings for the event loop and the terminal session."""
    fps: int = 30
    escape_timeout: float = 0.05
    alt_screen: bool = True
    mouse: bool = False
    bracketed_paste: bool = True
    paste_tab_width: int = 0
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.fps < 0:
            raise ValueError(f"fps must be >= 0, got {self.fps}")
        if self.escape_timeout < 0:
            raise ValueError(f"escape_timeout must be >= 0, got {self.escape_timeout}")
        if self.paste_tab_width < 0:
            raise ValueError(f"paste_tab_width must be >= 0, got {self.paste_tab_width}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @property
    def tick_interval(self) -> Optional[float]:
        """Seconds between ticks, or None when ticking is disabled."""
        return 1.0 / self.fps if self.fps else None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, base: Optional["RuntimeConfig"] = None) -> "RuntimeConfig":
        """
        Apply CELLTUI_* environment variables on top of base (or the defaults).

        Recognised: CELLTUI_FPS, CELLTUI_ESCAPE_TIMEOUT_MS, CELLTUI_ALT_SCREEN,
        CELLTUI_MOUSE, CELLTUI_BRACKETED_PASTE, CELLTUI_PASTE_TAB_WIDTH.
        """
        env = os.environ if environ is None else environ
        changes: dict[str, object] = {}

        for suffix, (field_name, scale) in _INT_VARS.items():
            raw = env.get(ENV_PREFIX + suffix)
            if raw is not None:
                value = _parse_int(ENV_PREFIX + suffix, raw)
                changes[field_name] = value / scale if scale != 1 else value
        for field_name in ("alt_screen", "mouse", "bracketed_paste"):
            name = ENV_PREFIX + field_name.upper()
            raw = env.get(name)
            if raw is not None:
                changes[field_name] = _parse_bool(name, raw)

        return replace(base or cls(), **changes)


def _parse_int(name: str, raw: str) -> int:
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (1/0, true/false, yes/no, on/off), got {raw!r}")
