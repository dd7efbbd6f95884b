import json

import pytest

from offsite_payments.exceptions import MissingRequiredField
from offsite_payments.integrations import okpay
from offsite_payments.integrations.status import CanonicalStatus


class TestOkpayHelper:

    def test_form_fields(self, okpay_config):
        helper = okpay.Helper("1001", okpay_config, amount="49.95", currency="USD")
        helper.set("description", "Store order")
        helper.set("customer", {"email": "buyer@example.com"})

        fields = dict(helper.form_fields())
        assert fields["ok_receiver"] == "OK123456789"
        assert fields["ok_invoice"] == "1001"
        assert fields["ok_item_1_price"] == "49.95"
        assert fields["ok_currency"] == "USD"
        assert fields["ok_item_1_type"] == "service"
        assert fields["ok_payer_email"] == "buyer@example.com"
        assert helper.service_url == "https://checkout.okpay.com/"

    def test_currency_required(self, okpay_config):
        helper = okpay.Helper("1001", okpay_config, amount="49.95")

        with pytest.raises(MissingRequiredField):
            helper.form_fields()


class TestOkpayNotification:

    def test_unsigned_payload_without_status(self):
        notification = okpay.Notification(b"ok_invoice=1001&ok_txn_gross=49.95")

        assert notification.order_id == "1001"
        assert notification.gross == "49.95"
        assert notification.status is CanonicalStatus.PENDING
        assert notification.acknowledge() is True

    @pytest.mark.parametrize("code,expected", [
        ("completed", CanonicalStatus.COMPLETED),
        ("Hold", CanonicalStatus.PENDING),
        ("reversed", CanonicalStatus.CHARGEBACK),
        ("error", CanonicalStatus.FAILED),
        ("mystery", CanonicalStatus.UNKNOWN),
    ])
    def test_status_table(self, code, expected):
        notification = okpay.Notification({"ok_invoice": "1001", "ok_txn_status": code})

        assert notification.status is expected

    def test_json_payload(self):
        body = json.dumps({
            "ok_txn_id": "2567",
            "ok_invoice": "1001",
            "ok_txn_gross": "49.95",
            "ok_txn_currency": "USD",
            "ok_txn_status": "completed",
            "ok_txn_datetime": "2026-03-04 10:11:12",
            "ok_txn_fee": "0.50",
        })
        notification = okpay.Notification(body, "application/json")

        assert notification.transaction_id == "2567"
        assert notification.is_complete
        assert notification.received_at.hour == 10
        assert notification.fee == "0.50"

    def test_xml_payload(self):
        body = "<ipn><ok_invoice>1001</ok_invoice><ok_txn_status>canceled</ok_txn_status></ipn>"
        notification = okpay.Notification(body, "application/xml")

        assert notification.item_id == "1001"
        assert notification.is_canceled
