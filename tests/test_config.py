"""AuthConfig 테스트"""

from pathlib import Path

import pytest

from mc_launcher.auth.config import (
    AuthConfig,
    game_access_token_key,
    identity_refresh_token_key,
)


class TestAuthConfig:
    def test_default_endpoints(self):
        config = AuthConfig()
        assert config.device_code_url == "https://login.microsoftonline.com/consumers/oauth2/v2.0/devicecode"
        assert config.token_url == "https://login.microsoftonline.com/consumers/oauth2/v2.0/token"
        assert config.scope == "XboxLive.signin offline_access"
        assert config.keyring_service == "mc-server-manager"

    def test_secret_keys(self):
        assert game_access_token_key("abc") == "mc_access_token_abc"
        assert identity_refresh_token_key("abc") == "ms_refresh_token_abc"

    def test_from_env_defaults(self, monkeypatch):
        for name in (
            "MC_LAUNCHER_CLIENT_ID",
            "MC_LAUNCHER_TENANT",
            "MC_LAUNCHER_KEYRING_SERVICE",
            "MC_LAUNCHER_SECRET_BACKEND",
            "MC_LAUNCHER_SECRET_FILE",
            "MC_LAUNCHER_HTTP_TIMEOUT",
        ):
            monkeypatch.delenv(name, raising=False)

        config = AuthConfig.from_env()
        assert config == AuthConfig()

    def test_from_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("MC_LAUNCHER_TENANT", "organizations")
        monkeypatch.setenv("MC_LAUNCHER_SECRET_BACKEND", "file")
        monkeypatch.setenv("MC_LAUNCHER_SECRET_FILE", str(tmp_path / "s.json"))
        monkeypatch.setenv("MC_LAUNCHER_HTTP_TIMEOUT", "5")

        config = AuthConfig.from_env()

        assert config.token_url.endswith("/organizations/oauth2/v2.0/token")
        assert config.secret_backend == "file"
        assert config.secret_file_path == Path(tmp_path / "s.json")
        assert config.http_timeout == 5.0

    def test_from_env_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("MC_LAUNCHER_HTTP_TIMEOUT", "soon")
        with pytest.raises(ValueError):
            AuthConfig.from_env()

    def test_default_secret_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr("platform.system", lambda: "Linux")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert AuthConfig().secret_file_path == tmp_path / "mc-server-manager" / "secure-storage.json"
