import logging

import pytest

from offsite_payments.config import ProviderConfig
from offsite_payments.exceptions import ConfigurationError
from offsite_payments.integrations import skrill
from offsite_payments.integrations.status import CanonicalStatus


def notification_body(**overrides):
    params = {
        "pay_to_email": "merchant@example.com",
        "pay_from_email": "buyer@example.com",
        "merchant_id": "42",
        "transaction_id": "77",
        "mb_transaction_id": "900123",
        "mb_amount": "100",
        "mb_currency": "USD",
        "amount": "100",
        "currency": "USD",
        "status": "2",
        "md5sig": "88E8818F75AA57AC84CE0D8667C225D5",
    }
    params.update(overrides)
    return params


class TestSkrillSignature:

    def test_secret_word_digest(self, secret):
        assert skrill.secret_word_digest(secret) == "A4D80EAC9AB26A4A2DA04125BC2C096A"

    def test_recipe_matches_fixture(self, secret):
        assert skrill.RECIPE.sign(notification_body(), secret) == "88E8818F75AA57AC84CE0D8667C225D5"
        assert (
            skrill.RECIPE.sign(notification_body(status="0"), secret)
            == "50A42982D8C0C1B8793DED9D9E2BC89A"
        )
        assert (
            skrill.RECIPE.sign(notification_body(mb_amount="100.00"), secret)
            == "457B8FE52B7919D8FC76EFDE91515A3C"
        )


class TestSkrillNotification:

    def test_acknowledge(self, skrill_config):
        notification = skrill.Notification(notification_body(), config=skrill_config)

        assert notification.acknowledge() is True
        assert notification.transaction_id == "900123"
        assert notification.item_id == "77"
        assert notification.payer_email == "buyer@example.com"
        assert notification.receiver_email == "merchant@example.com"
        assert notification.status is CanonicalStatus.COMPLETED

    def test_lowercase_signature_accepted(self, skrill_config):
        body = notification_body(md5sig="88e8818f75aa57ac84ce0d8667c225d5")

        assert skrill.Notification(body, config=skrill_config).acknowledge() is True

    def test_altered_field_rejected(self, skrill_config):
        body = notification_body(mb_amount="1000")

        assert skrill.Notification(body, config=skrill_config).acknowledge() is False

    def test_other_merchant_rejected(self, secret):
        config = ProviderConfig(account="merchant@example.com", secret=secret, credential2="43")

        assert skrill.Notification(notification_body(), config=config).acknowledge() is False

    def test_missing_secret_is_not_acknowledged(self, caplog):
        config = ProviderConfig(account="merchant@example.com", credential2="42")
        notification = skrill.Notification(notification_body(), config=config)

        with caplog.at_level(logging.ERROR):
            assert notification.acknowledge() is False
        assert "secret" in caplog.text
        with pytest.raises(ConfigurationError):
            notification.check_configuration()

    def test_pending_is_acknowledged(self, skrill_config):
        body = notification_body(status="0", md5sig="50A42982D8C0C1B8793DED9D9E2BC89A")
        notification = skrill.Notification(body, config=skrill_config)

        assert notification.acknowledge() is True
        assert notification.is_pending

    def test_chargeback(self, skrill_config):
        notification = skrill.Notification(notification_body(status="-3"), config=skrill_config)

        assert notification.is_chargeback


class TestSkrillHelper:

    def test_form_fields(self, skrill_config):
        helper = skrill.Helper("77", skrill_config, amount="100", currency="USD",
                               recipient_description="Example Store")
        helper.set("notify_url", "https://shop.example.com/notifications/skrill")
        fields = dict(helper.form_fields())

        assert fields["pay_to_email"] == "merchant@example.com"
        assert fields["transaction_id"] == "77"
        assert fields["amount"] == "100.00"
        assert fields["detail1_description"] == "Order:"
        assert fields["recipient_description"] == "Example Store"
        assert fields["status_url"] == "https://shop.example.com/notifications/skrill"
