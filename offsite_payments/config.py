from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError, UnknownIntegration


class IntegrationMode(str, Enum):
    TEST = "test"
    PRODUCTION = "production"


class ProviderConfig(BaseModel):
    """Credentials for one provider, passed into each adapter constructor.

    The meaning of ``secret``, ``credential2`` and ``credential3`` is
    provider-specific and documented on each integration module.
    """

    model_config = ConfigDict(frozen=True)

    account: str | None = None
    secret: str | None = None
    credential2: str | None = None
    credential3: str | None = None
    mode: IntegrationMode = IntegrationMode.TEST

    def require(self, name: str) -> str:
        """Return credential ``name`` or raise if it is not configured."""
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Missing provider credential: {name}")
        return value


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    database_url: str = "sqlite+aiosqlite:///./offsite_payments.db"
    HTTP_PORT: int = 8000
    INTEGRATION_MODE: IntegrationMode = IntegrationMode.TEST

    OKPAY_ACCOUNT: str | None = None

    SKRILL_ACCOUNT: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SKRILL_ACCOUNT", "MONEYBOOKERS_ACCOUNT"),
    )
    SKRILL_MERCHANT_ID: str | None = None
    SKRILL_SECRET_WORD: str | None = None

    PAYDOLLAR_MERCHANT_ID: str | None = None
    PAYDOLLAR_SECURE_HASH_SECRET: str | None = None

    AUTHORIZE_NET_SIM_LOGIN: str | None = None
    AUTHORIZE_NET_SIM_TRANSACTION_KEY: str | None = None
    AUTHORIZE_NET_SIM_MD5_HASH: str | None = None

    FIRST_DATA_PAYMENT_PAGE_ID: str | None = None
    FIRST_DATA_TRANSACTION_KEY: str | None = None
    FIRST_DATA_RESPONSE_KEY: str | None = None

    PAYU_IN_MERCHANT_KEY: str | None = None
    PAYU_IN_SALT: str | None = None

    CYBERSOURCE_ACCESS_KEY: str | None = None
    CYBERSOURCE_PROFILE_ID: str | None = None
    CYBERSOURCE_SECRET_KEY: str | None = None

    def provider_config(self, name: str) -> ProviderConfig:
        """Build the read-only credential record for integration ``name``."""
        credentials = {
            "okpay": dict(account=self.OKPAY_ACCOUNT),
            "skrill": dict(
                account=self.SKRILL_ACCOUNT,
                secret=self.SKRILL_SECRET_WORD,
                credential2=self.SKRILL_MERCHANT_ID,
            ),
            "paydollar": dict(
                account=self.PAYDOLLAR_MERCHANT_ID,
                secret=self.PAYDOLLAR_SECURE_HASH_SECRET,
            ),
            "authorize_net_sim": dict(
                account=self.AUTHORIZE_NET_SIM_LOGIN,
                secret=self.AUTHORIZE_NET_SIM_MD5_HASH,
                credential2=self.AUTHORIZE_NET_SIM_TRANSACTION_KEY,
            ),
            "first_data": dict(
                account=self.FIRST_DATA_PAYMENT_PAGE_ID,
                secret=self.FIRST_DATA_RESPONSE_KEY,
                credential2=self.FIRST_DATA_TRANSACTION_KEY,
            ),
            "payu_in": dict(
                account=self.PAYU_IN_MERCHANT_KEY,
                secret=self.PAYU_IN_SALT,
            ),
            "cybersource_secure_acceptance": dict(
                account=self.CYBERSOURCE_ACCESS_KEY,
                secret=self.CYBERSOURCE_SECRET_KEY,
                credential2=self.CYBERSOURCE_PROFILE_ID,
            ),
        }
        if name not in credentials:
            raise UnknownIntegration(f"Unknown integration: {name}")
        return ProviderConfig(mode=self.INTEGRATION_MODE, **credentials[name])


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    return Settings()
