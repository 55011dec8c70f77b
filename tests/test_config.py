"""
Configuration, theme and logging tests
"""

import pytest
from loguru import logger

from micron.config import AppSettings, appsettings
from micron.lib.errors import ThemeError
from micron.lib.log import LOG, state_connectToLogger, state_connected
from micron.lib.theme import Theme, themes_listAvailable
from micron.models import ProgramState


class TestSettings:
    """AppSettings defaults, helpers and environment overrides"""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.extract_round_cap == 32
        assert settings.strip_iteration_cap == 10
        assert settings.max_line_length == 130
        assert settings.history_limit == 50
        assert settings.storage_key == "micronEditorContent"
        assert settings.download_filename == "page.mu"

    def test_placeholder_round_trip(self):
        placeholder = appsettings.placeHolder_make(3)
        assert placeholder == "\x00###M3###\x00"
        assert appsettings.markerIndex_extract(placeholder) == 3

    @pytest.mark.parametrize("text", ["###M3###", "\x00###Mx###\x00", "plain"])
    def test_marker_index_rejects(self, text):
        assert appsettings.markerIndex_extract(text) is None

    def test_placeholder_pattern(self):
        match = appsettings.placeholder_pattern().search("a\x00###M12###\x00b")
        assert match.group(1) == "12"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MICRON_STRIP_ITERATION_CAP", "20")
        monkeypatch.setenv("MICRON_BLOCKED_URL_SCHEMES", '["javascript"]')
        settings = AppSettings()
        assert settings.strip_iteration_cap == 20
        assert settings.blocked_url_schemes == ["javascript"]


class TestTheme:
    """Theme loading"""

    def test_available(self):
        assert {"default", "light"} <= set(themes_listAvailable())

    def test_unknown_theme(self):
        with pytest.raises(ThemeError):
            Theme("no-such-theme")

    def test_missing_yaml(self, tmp_path):
        (tmp_path / "empty").mkdir()
        with pytest.raises(ThemeError):
            Theme("empty", themes_dir=tmp_path)

    def test_invalid_yaml(self, tmp_path):
        (tmp_path / "bad").mkdir()
        (tmp_path / "bad" / "theme.yaml").write_text("styles: [unclosed", encoding="utf-8")
        with pytest.raises(ThemeError):
            Theme("bad", themes_dir=tmp_path)

    def test_style_attr(self):
        theme = Theme()
        assert theme.styleAttr_get("bold") == ' style="color: #58a6ff; font-weight: bold;"'
        assert theme.styleAttr_get("nothing") == ""
        assert theme.styleAttr_get("nothing", prefix="color: #f00;") == ' style="color: #f00;"'

    def test_config_get(self):
        theme = Theme("light")
        assert theme.config_get("page.background") == "#ffffff"
        assert theme.config_get("page.missing", "x") == "x"
        assert theme.pygmentsStyle_get() == "default"


class TestLog:
    """Verbosity-gated logging"""

    @pytest.fixture
    def messages(self):
        captured = []
        handler_id = logger.add(captured.append, format="{message}")
        yield captured
        logger.remove(handler_id)
        state_connectToLogger(None)

    def test_silent_without_state(self, messages):
        state_connectToLogger(None)
        LOG("nobody listens", level=1)
        assert messages == []

    def test_verbosity_gate(self, messages):
        state_connectToLogger(ProgramState(verbosity=2))
        LOG("shown", level=2)
        LOG("hidden", level=3)
        assert any("shown" in m for m in messages)
        assert not any("hidden" in m for m in messages)

    def test_state_connected_scope(self, messages):
        state_connectToLogger(None)
        with state_connected(ProgramState(verbosity=1)):
            LOG("inside", level=1)
        LOG("outside", level=1)
        assert any("inside" in m for m in messages)
        assert not any("outside" in m for m in messages)

    def test_debug_mode_without_state(self, messages, monkeypatch):
        """Debug mode shows library logging with no state connected"""
        monkeypatch.setattr(appsettings, "debug_mode", True)
        state_connectToLogger(None)
        LOG("extraction detail", level=2)
        assert any("extraction detail" in m for m in messages)
