"""Tests for RuntimeConfig and its environment overrides."""

import pytest

from celltui.app.config import RuntimeConfig


class TestDefaults:
    def test_values(self) -> None:
        config = RuntimeConfig()
        assert config.fps == 30
        assert config.escape_timeout == 0.05
        assert config.alt_screen and config.bracketed_paste
        assert not config.mouse

    def test_tick_interval(self) -> None:
        assert RuntimeConfig(fps=20).tick_interval == pytest.approx(0.05)
        assert RuntimeConfig(fps=0).tick_interval is None

    @pytest.mark.parametrize("field,value", [
        ("fps", -1),
        ("escape_timeout", -0.1),
        ("paste_tab_width", -2),
        ("max_workers", 0),
    ])
    def test_invalid(self, field: str, value) -> None:
        with pytest.raises(ValueError, match=field):
            RuntimeConfig(**{field: value})


class TestFromEnv:
    """CELLTUI_* overrides."""

    def test_empty_environment(self) -> None:
        assert RuntimeConfig.from_env({}) == RuntimeConfig()

    def test_overrides(self) -> None:
        config = RuntimeConfig.from_env({
            "CELLTUI_FPS": "60",
            "CELLTUI_ESCAPE_TIMEOUT_MS": "25",
            "CELLTUI_MOUSE": "yes",
            "CELLTUI_ALT_SCREEN": "off",
            "CELLTUI_PASTE_TAB_WIDTH": " 4 ",
        })
        assert config.fps == 60
        assert config.escape_timeout == pytest.approx(0.025)
        assert config.mouse is True
        assert config.alt_screen is False
        assert config.paste_tab_width == 4

    def test_base_is_kept(self) -> None:
        base = RuntimeConfig(fps=10, max_workers=2)
        config = RuntimeConfig.from_env({"CELLTUI_MOUSE": "1"}, base=base)
        assert (config.fps, config.max_workers, config.mouse) == (10, 2, True)

    def test_unrelated_variables_ignored(self) -> None:
        assert RuntimeConfig.from_env({"FPS": "5", "CELLTUI_OTHER": "x"}) == RuntimeConfig()

    @pytest.mark.parametrize("name,raw", [
        ("CELLTUI_FPS", "fast"),
        ("CELLTUI_FPS", "-3"),
        ("CELLTUI_ESCAPE_TIMEOUT_MS", "1.5"),
        ("CELLTUI_MOUSE", "maybe"),
    ])
    def test_bad_values_name_the_variable(self, name: str, raw: str) -> None:
        with pytest.raises(ValueError, match=name):
            RuntimeConfig.from_env({name: raw})
