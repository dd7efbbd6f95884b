"""Skrill (formerly Moneybookers) Quick Checkout.

Credentials: ``account`` is the merchant e-mail (``pay_to_email``),
``secret`` the secret word set in the Skrill account settings, and
``credential2`` the numeric merchant ID, checked against notifications when
configured.
"""

import logging

from ...config import IntegrationMode
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields
from ..mapping import FieldMapping
from ..signatures import SECRET, DigestAlgorithm, SignatureRecipe, hexdigest
from ..status import CanonicalStatus, StatusTable

logger = logging.getLogger(__name__)

NAME = "skrill"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://pay.skrill.com",
    IntegrationMode.PRODUCTION: "https://pay.skrill.com",
}

MAPPING = FieldMapping({
    "account": "pay_to_email",
    "order": "transaction_id",
    "amount": "amount",
    "currency": "currency",
    "description": "detail1_text",
    "return_url": "return_url",
    "cancel_return_url": "cancel_url",
    "notify_url": "status_url",
    "language": "language",
    "customer": {
        "first_name": "firstname",
        "last_name": "lastname",
        "email": "pay_from_email",
        "phone": "phone_number",
    },
    "billing_address": {
        "address1": "address",
        "address2": "address2",
        "city": "city",
        "state": "state",
        "zip": "postal_code",
        "country": "country",
    },
}).freeze()

STATUSES = StatusTable({
    "2": CanonicalStatus.COMPLETED,
    "0": CanonicalStatus.PENDING,
    "-1": CanonicalStatus.CANCELED,
    "-2": CanonicalStatus.FAILED,
    "-3": CanonicalStatus.CHARGEBACK,
})


def secret_word_digest(secret: str) -> str:
    """Skrill signs with the upper-case MD5 of the secret word, not the word."""
    return hexdigest(secret, DigestAlgorithm.MD5, uppercase=True)


RECIPE = SignatureRecipe(
    fields=("merchant_id", "transaction_id", SECRET, "mb_amount", "mb_currency", "status"),
    algorithm=DigestAlgorithm.MD5,
    uppercase=True,
    secret_transform=secret_word_digest,
)


class Helper(BaseHelper):
    integration_name = NAME
    mapping = MAPPING
    required_fields = ("account", "order", "amount", "currency")
    service_urls = SERVICE_URLS

    def __init__(self, order, config, **kwargs):
        super().__init__(order, config, **kwargs)
        self.add_field("detail1_description", "Order:")
        self.add_field("recipient_description", self.options.get("recipient_description"))


class Notification(BaseNotification):
    integration_name = NAME
    fields = NotificationFields(
        transaction_id="mb_transaction_id",
        item_id="transaction_id",
        gross="amount",
        currency="currency",
        status="status",
        payer_email="pay_from_email",
        receiver_email="pay_to_email",
        signature="md5sig",
    )
    status_table = STATUSES
    recipe = RECIPE

    @property
    def merchant_id(self):
        return self.param("merchant_id")

    @property
    def failed_reason_code(self):
        return self.param("failed_reason_code")

    def acknowledge(self) -> bool:
        expected_merchant = self.config.credential2
        if expected_merchant and self.merchant_id != expected_merchant:
            logger.warning(
                "Skrill notification for item %s addressed to merchant %s",
                self.item_id,
                self.merchant_id,
            )
            return False
        return super().acknowledge()


__all__ = ["NAME", "Helper", "Notification", "RECIPE", "secret_word_digest"]
