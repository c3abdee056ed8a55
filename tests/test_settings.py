"""
settings.py のテスト

tmp_path に default.toml / user.toml を置いて読み込み順を確認する。
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from datetime import timedelta

from pishock import settings as s_mod

DEFAULT_TOML = """
[api]
app_name = "from-default"
timeout = 5.0

[curve]
resolution_ms = 750
command_delay_ms = 200
"""

USER_TOML = """
[api]
app_name = "from-user"

[device]
cooldown = 0.4
unknown_key = 1
"""


class TestLoad:

    def test_defaults_without_files(self, tmp_path, monkeypatch):
        for key in ("PISHOCK_USERNAME", "PISHOCK_APIKEY", "PISHOCK_SHARECODE"):
            monkeypatch.delenv(key, raising=False)
        s = s_mod.load(tmp_path)
        assert s.api.url == "https://do.pishock.com/api"
        assert s.curve.resolution == timedelta(milliseconds=500)
        assert s.curve.command_delay == 0.1
        assert s.api.username == ""

    def test_user_overrides_default(self, tmp_path):
        (tmp_path / "default.toml").write_text(DEFAULT_TOML, encoding="utf-8")
        (tmp_path / "user.toml").write_text(USER_TOML, encoding="utf-8")
        s = s_mod.load(tmp_path)
        assert s.api.app_name == "from-user"
        assert s.api.timeout == 5.0
        assert s.curve.resolution_ms == 750
        assert s.curve.command_delay == 0.2
        assert s.device.cooldown == 0.4
        assert not hasattr(s.device, "unknown_key")

    def test_env_secrets_win(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PISHOCK_USERNAME", "env-user")
        monkeypatch.setenv("PISHOCK_APIKEY", "env-key")
        monkeypatch.setenv("PISHOCK_SHARECODE", "env-code")
        s = s_mod.load(tmp_path)
        assert (s.api.username, s.api.api_key, s.api.share_code) == ("env-user", "env-key", "env-code")

    def test_config_dir_from_env(self, tmp_path, monkeypatch):
        (tmp_path / "default.toml").write_text(DEFAULT_TOML, encoding="utf-8")
        monkeypatch.setenv("PISHOCK_CONFIG_DIR", str(tmp_path))
        assert s_mod.load().api.app_name == "from-default"


class TestSetupLogging:

    def test_file_handler(self, tmp_path):
        import logging
        from pishock.log import setup_logging

        s = s_mod.Settings()
        s.debug.log_to_file = True
        s.debug.log_level = "debug"
        s.debug.log_file = str(tmp_path / "logs" / "pishock.log")
        root = logging.getLogger()
        try:
            setup_logging(s)
            logging.getLogger("pishock.test").debug("hello")
            assert root.level == logging.DEBUG
            assert (tmp_path / "logs" / "pishock.log").exists()
        finally:
            root.setLevel(logging.WARNING)
            for handler in list(root.handlers):
                if isinstance(handler, logging.FileHandler):
                    root.removeHandler(handler)
                    handler.close()
