import pytest

from offsite_payments.config import IntegrationMode, ProviderConfig
from offsite_payments.integrations import paydollar

URLS = dict(
    return_url="https://shop.example.com/ok",
    failure_url="https://shop.example.com/fail",
    cancel_return_url="https://shop.example.com/cancel",
)


def datafeed(**overrides):
    params = {
        "src": "0",
        "prc": "0",
        "Ord": "6697090",
        "Holder": "Test Card",
        "successcode": "0",
        "Ref": "1001",
        "PayRef": "2001",
        "Amt": "10.00",
        "Cur": "344",
        "payerAuth": "N",
        "TxTime": "2026-05-06 07:08:09.0",
        "secureHash": "24A514021CA2F3BBE169119E8E770C89C2F6F186",
    }
    params.update(overrides)
    return params


def build_helper(config):
    helper = paydollar.Helper("1001", config, amount="10", currency="HKD")
    for canonical, url in URLS.items():
        helper.set(canonical, url)
    return helper


class TestPaydollarHelper:

    def test_signed_form_fields(self, paydollar_config):
        fields = build_helper(paydollar_config).form_fields()

        assert fields[-1] == ("secureHash", "c9bfc39487727d6bebab1c2d189fbf8bc48cd56c")
        values = dict(fields)
        assert values["merchantId"] == "1"
        assert values["currCode"] == "344"
        assert values["payType"] == "N"
        assert values["lang"] == "E"

    def test_unsigned_without_secret(self):
        fields = dict(build_helper(ProviderConfig(account="1")).form_fields())

        assert "secureHash" not in fields

    def test_unsupported_currency(self, paydollar_config):
        with pytest.raises(ValueError):
            paydollar.Helper("1001", paydollar_config, amount="10", currency="ZZZ")

    def test_currency_is_validated_before_lookup(self, paydollar_config):
        with pytest.raises(ValueError):
            paydollar.Helper("1001", paydollar_config, amount="10", currency="hk$")

    def test_service_urls(self, secret):
        live = build_helper(ProviderConfig(account="1", secret=secret, mode=IntegrationMode.PRODUCTION))

        assert live.service_url == "https://www.paydollar.com/b2c2/eng/payment/payForm.jsp"
        assert "test.paydollar.com" in build_helper(ProviderConfig(account="1")).service_url


class TestPaydollarNotification:

    def test_acknowledge(self, paydollar_config):
        notification = paydollar.Notification(datafeed(), config=paydollar_config)

        assert notification.acknowledge() is True
        assert notification.item_id == "1001"
        assert notification.transaction_id == "2001"
        assert notification.currency == "344"
        assert notification.received_at.second == 9
        assert notification.bank_reference_order_id == "6697090"
        assert notification.response_body == "OK"

    def test_failed_payment_not_acknowledged(self, paydollar_config):
        notification = paydollar.Notification(datafeed(successcode="1"), config=paydollar_config)

        assert notification.is_failed
        assert notification.acknowledge() is False

    def test_tampered_amount(self, paydollar_config):
        notification = paydollar.Notification(datafeed(Amt="1.00"), config=paydollar_config)

        assert notification.acknowledge() is False

    def test_without_secret_status_decides(self):
        config = ProviderConfig(account="1")

        assert paydollar.Notification(datafeed(secureHash=""), config=config).acknowledge() is True
        assert paydollar.Notification(datafeed(successcode="1"), config=config).acknowledge() is False

    def test_card_and_channel_details(self, paydollar_config):
        body = datafeed(
            eci="07",
            AlertCode="R14",
            panFirst4="4918",
            panLast4="5005",
            cardIssuingCountry="HK",
            channelType="SPC",
            accountHash="ab12",
            accountHashAlgo="SHA-1",
            airline_ticketNumber="1601234567",
        )
        notification = paydollar.Notification(body, config=paydollar_config)

        assert notification.acknowledge() is True
        assert notification.paydollar_ref == "2001"
        assert notification.currency_code == "HKD"
        assert notification.transaction_time == "2026-05-06 07:08:09.0"
        assert notification.eci == "07"
        assert notification.alert_code == "R14"
        assert notification.pan_first4 == "4918"
        assert notification.pan_last4 == "5005"
        assert notification.card_issuing_country == "HK"
        assert notification.channel_type == "SPC"
        assert notification.account_hash == "ab12"
        assert notification.account_hash_algo == "SHA-1"
        assert notification.air_ticket_number == "1601234567"

    def test_multi_currency_schedule_and_installments(self, paydollar_config):
        body = datafeed(
            mpsAmt="10.00",
            mpsCur="344",
            mpsForeignAmt="1.28",
            mpsForeignCur="840",
            mpsRate="7.8",
            mSchPayId="55",
            dSchPayId="56",
            installment_period="6",
            installment_firstPayAmt="2.00",
            installment_eachPayAmt="1.60",
            installment_lastPayAmt="0.00",
        )
        notification = paydollar.Notification(body, config=paydollar_config)

        assert notification.mps_amount == "10.00"
        assert notification.mps_currency == "344"
        assert notification.mps_foreign_amount == "1.28"
        assert notification.mps_foreign_currency == "840"
        assert notification.mps_exchange_rate == "7.8"
        assert notification.master_schedule_payment_id == "55"
        assert notification.detail_schedule_payment_id == "56"
        assert notification.installment_period == "6"
        assert notification.installment_first_pay_amount == "2.00"
        assert notification.installment_each_pay_amount == "1.60"
        assert notification.installment_last_pay_amount == "0.00"
        assert notification.eci is None

    def test_needs_no_credentials(self):
        paydollar.Notification(datafeed(), config=ProviderConfig()).check_configuration()
