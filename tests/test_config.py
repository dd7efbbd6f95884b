import pytest
from pydantic import ValidationError

from offsite_payments.config import IntegrationMode, ProviderConfig, Settings, get_settings
from offsite_payments.exceptions import ConfigurationError, UnknownIntegration
from offsite_payments.integrations import INTEGRATIONS


class TestProviderConfig:

    def test_frozen(self):
        config = ProviderConfig(account="a")

        with pytest.raises(ValidationError):
            config.account = "b"

    def test_require(self):
        config = ProviderConfig(account="a")

        assert config.require("account") == "a"
        with pytest.raises(ConfigurationError):
            config.require("secret")

    def test_default_mode(self):
        assert ProviderConfig().mode is IntegrationMode.TEST


class TestSettings:

    @pytest.mark.parametrize("name", sorted(INTEGRATIONS))
    def test_every_integration_has_credentials(self, test_settings, name):
        config = test_settings.provider_config(name)

        assert config.account
        assert config.mode is IntegrationMode.TEST

    def test_credential_slots(self, test_settings):
        skrill = test_settings.provider_config("skrill")
        authorize_net = test_settings.provider_config("authorize_net_sim")

        assert skrill.credential2 == "42"
        assert authorize_net.secret == "s3cr3t"
        assert authorize_net.credential2 == "8CP6zJ7uD875J6tY"

    def test_unknown_integration(self, test_settings):
        with pytest.raises(UnknownIntegration):
            test_settings.provider_config("paypal")

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("INTEGRATION_MODE", "production")
        monkeypatch.setenv("MONEYBOOKERS_ACCOUNT", "legacy@example.com")
        monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./other.db")

        settings = Settings(_env_file=None)

        assert settings.INTEGRATION_MODE is IntegrationMode.PRODUCTION
        assert settings.SKRILL_ACCOUNT == "legacy@example.com"
        assert settings.database_url == "sqlite+aiosqlite:///./other.db"
        assert settings.provider_config("skrill").mode is IntegrationMode.PRODUCTION

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
