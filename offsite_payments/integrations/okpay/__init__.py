"""OKPay hosted checkout.

Credentials: ``account`` is the merchant's OKPay wallet ID or e-mail.
OKPay notifications carry no signature; the provider expects merchants to
post the IPN back for verification, which is left to the calling application.
"""

from ...config import IntegrationMode
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields
from ..mapping import FieldMapping
from ..payload import ALL_CONTENT_TYPES
from ..status import CanonicalStatus, StatusTable

NAME = "okpay"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://checkout.okpay.com/",
    IntegrationMode.PRODUCTION: "https://checkout.okpay.com/",
}

MAPPING = FieldMapping({
    "account": "ok_receiver",
    "order": "ok_invoice",
    "amount": "ok_item_1_price",
    "currency": "ok_currency",
    "description": "ok_item_1_name",
    "return_url": "ok_return_success",
    "cancel_return_url": "ok_return_fail",
    "notify_url": "ok_ipn",
    "customer": {
        "first_name": "ok_payer_first_name",
        "last_name": "ok_payer_last_name",
        "email": "ok_payer_email",
        "phone": "ok_payer_phone",
    },
}).freeze()

STATUSES = StatusTable({
    "completed": CanonicalStatus.COMPLETED,
    "pending": CanonicalStatus.PENDING,
    "hold": CanonicalStatus.PENDING,
    "canceled": CanonicalStatus.CANCELED,
    "reversed": CanonicalStatus.CHARGEBACK,
    "error": CanonicalStatus.FAILED,
}, case_sensitive=False)


class Helper(BaseHelper):
    integration_name = NAME
    mapping = MAPPING
    required_fields = ("account", "order", "amount", "currency")
    service_urls = SERVICE_URLS

    def __init__(self, order, config, **kwargs):
        super().__init__(order, config, **kwargs)
        self.add_field("ok_item_1_type", "service")


class Notification(BaseNotification):
    integration_name = NAME
    content_types = ALL_CONTENT_TYPES
    fields = NotificationFields(
        transaction_id="ok_txn_id",
        item_id="ok_invoice",
        gross="ok_txn_gross",
        currency="ok_txn_currency",
        status="ok_txn_status",
        received_at="ok_txn_datetime",
        payer_email="ok_payer_email",
        receiver_email="ok_receiver_email",
    )
    status_table = STATUSES
    absent_status = CanonicalStatus.PENDING
    received_at_format = "%Y-%m-%d %H:%M:%S"

    @property
    def fee(self):
        return self.param("ok_txn_fee")

    @property
    def transaction_kind(self):
        return self.param("ok_txn_kind")


__all__ = ["NAME", "Helper", "Notification"]
