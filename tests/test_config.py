import dataclasses

import pytest

from relay import create_app
from relay.config import ConfigError, LocalConfig, ProductionConfig, RelaySettings, get_config

DISCORD_URL = "https://discord.com/api/webhooks/123/token"


class TestRelaySettings:

    def test_defaults(self):
        settings = RelaySettings.from_env({"DISCORD_WEBHOOK_URL": DISCORD_URL})

        assert settings.discord_webhook_url == DISCORD_URL
        assert settings.jenkins_url == ""
        assert settings.port == 8080
        assert settings.input_shape == "auto"
        assert settings.delivery_timeout == 30

    def test_all_values(self):
        settings = RelaySettings.from_env({
            "DISCORD_WEBHOOK_URL": DISCORD_URL,
            "JENKINS_URL": "not even a url",
            "PORT": "9000",
            "RELAY_INPUT_SHAPE": "Legacy",
        })

        assert settings.jenkins_url == "not even a url"
        assert settings.port == 9000
        assert settings.input_shape == "legacy"

    def test_missing_discord_url(self):
        with pytest.raises(ConfigError, match="DISCORD_WEBHOOK_URL"):
            RelaySettings.from_env({"PORT": "8080"})

    def test_blank_discord_url(self):
        with pytest.raises(ConfigError):
            RelaySettings.from_env({"DISCORD_WEBHOOK_URL": "   "})

    @pytest.mark.parametrize("port", ["http", "80.5", "-1"])
    def test_invalid_port(self, port):
        with pytest.raises(ConfigError, match="PORT"):
            RelaySettings.from_env({"DISCORD_WEBHOOK_URL": DISCORD_URL, "PORT": port})

    def test_port_zero_is_allowed(self):
        assert RelaySettings.from_env({"DISCORD_WEBHOOK_URL": DISCORD_URL, "PORT": "0"}).port == 0

    def test_unknown_shape(self):
        with pytest.raises(ConfigError):
            RelaySettings.from_env({"DISCORD_WEBHOOK_URL": DISCORD_URL, "RELAY_INPUT_SHAPE": "xml"})

    def test_immutable(self):
        settings = RelaySettings(discord_webhook_url=DISCORD_URL)

        with pytest.raises(dataclasses.FrozenInstanceError):
            settings.port = 1


class TestGetConfig:

    def test_default_is_local(self, monkeypatch):
        monkeypatch.delenv("FLASK_ENV", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)

        assert get_config() is LocalConfig

    def test_production(self, monkeypatch):
        monkeypatch.delenv("FLASK_ENV", raising=False)
        monkeypatch.setenv("ENVIRONMENT", "prod")

        assert get_config() is ProductionConfig


def test_create_app_refuses_to_start_without_discord_url(monkeypatch):
    monkeypatch.delenv("DISCORD_WEBHOOK_URL", raising=False)

    with pytest.raises(ConfigError):
        create_app()
