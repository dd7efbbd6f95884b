"""
Pytest configuration and fixtures for offsite payments tests.
"""

import os
import sys

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.append(ROOT_DIR)

from offsite_payments.config import IntegrationMode, ProviderConfig, Settings  # noqa: E402
from offsite_payments.models import Base  # noqa: E402

SECRET = "s3cr3t"


@pytest.fixture
def secret():
    return SECRET


@pytest.fixture
def okpay_config():
    return ProviderConfig(account="OK123456789")


@pytest.fixture
def skrill_config():
    return ProviderConfig(account="merchant@example.com", secret=SECRET, credential2="42")


@pytest.fixture
def paydollar_config():
    return ProviderConfig(account="1", secret=SECRET)


@pytest.fixture
def authorize_net_config():
    return ProviderConfig(account="8wd65QS", secret=SECRET, credential2="8CP6zJ7uD875J6tY")


@pytest.fixture
def payu_config():
    return ProviderConfig(account="C0Dr8m", secret="3sf0jURk")


@pytest.fixture
def cybersource_config():
    return ProviderConfig(account="ak", secret=SECRET, credential2="pid")


@pytest.fixture
def test_settings():
    """Settings with credentials for every integration and an in-memory database."""
    return Settings(
        _env_file=None,
        database_url="sqlite+aiosqlite:///:memory:",
        INTEGRATION_MODE=IntegrationMode.TEST,
        OKPAY_ACCOUNT="OK123456789",
        SKRILL_ACCOUNT="merchant@example.com",
        SKRILL_MERCHANT_ID="42",
        SKRILL_SECRET_WORD=SECRET,
        PAYDOLLAR_MERCHANT_ID="1",
        PAYDOLLAR_SECURE_HASH_SECRET=SECRET,
        AUTHORIZE_NET_SIM_LOGIN="8wd65QS",
        AUTHORIZE_NET_SIM_TRANSACTION_KEY="8CP6zJ7uD875J6tY",
        AUTHORIZE_NET_SIM_MD5_HASH=SECRET,
        FIRST_DATA_PAYMENT_PAGE_ID="WSP-DEMO-01",
        FIRST_DATA_TRANSACTION_KEY="8CP6zJ7uD875J6tY",
        FIRST_DATA_RESPONSE_KEY=SECRET,
        PAYU_IN_MERCHANT_KEY="C0Dr8m",
        PAYU_IN_SALT="3sf0jURk",
        CYBERSOURCE_ACCESS_KEY="ak",
        CYBERSOURCE_PROFILE_ID="pid",
        CYBERSOURCE_SECRET_KEY=SECRET,
    )


@pytest_asyncio.fixture
async def sessionmaker():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
