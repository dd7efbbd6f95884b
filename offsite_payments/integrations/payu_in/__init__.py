"""PayU India hosted checkout.

Credentials: ``account`` is the merchant key and ``secret`` the salt.
Requests and responses both carry a SHA-512 ``hash``; the response hash runs
over the same fields in reverse order, starting from the salt and the
transaction status.
"""

import logging
from decimal import Decimal
from typing import Any, List, Mapping, Optional

from ...config import IntegrationMode
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields, NotificationReturn
from ..mapping import FieldMapping
from ..money import parse_amount, to_decimal
from ..payload import FORM, JSON
from ..signatures import SECRET, DigestAlgorithm, SignatureRecipe
from ..status import CanonicalStatus, StatusTable

logger = logging.getLogger(__name__)

NAME = "payu_in"

CURRENCY = "INR"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://test.payu.in/_payment",
    IntegrationMode.PRODUCTION: "https://secure.payu.in/_payment",
}

USER_DEFINED_FIELDS = tuple(f"udf{index}" for index in range(1, 11))

MAPPING = FieldMapping({
    "account": "key",
    "order": "txnid",
    "amount": "amount",
    "description": "productinfo",
    "customer": {
        "first_name": "firstname",
        "last_name": "lastname",
        "email": "email",
        "phone": "phone",
    },
    "billing_address": {
        "address1": "address1",
        "address2": "address2",
        "city": "city",
        "state": "state",
        "zip": "zipcode",
        "country": "country",
    },
    "user_defined": {name: name for name in USER_DEFINED_FIELDS},
    "return_url": "surl",
    "failure_url": "furl",
    "cancel_return_url": "curl",
    "payment_gateway": "pg",
}).freeze()

STATUSES = StatusTable({
    "success": CanonicalStatus.COMPLETED,
    "pending": CanonicalStatus.PENDING,
    "failure": CanonicalStatus.FAILED,
}, case_sensitive=False)

REQUEST_RECIPE = SignatureRecipe(
    fields=("key", "txnid", "amount", "productinfo", "firstname", "email")
    + USER_DEFINED_FIELDS
    + (SECRET,),
    algorithm=DigestAlgorithm.SHA512,
    separator="|",
)

_RESPONSE_FIELDS = (
    (SECRET, "status")
    + tuple(reversed(USER_DEFINED_FIELDS))
    + ("email", "firstname", "productinfo", "amount", "txnid", "key")
)

RESPONSE_RECIPE = SignatureRecipe(
    fields=_RESPONSE_FIELDS,
    algorithm=DigestAlgorithm.SHA512,
    separator="|",
)

# Used when PayU adds convenience charges to the transaction.
RESPONSE_WITH_CHARGES_RECIPE = SignatureRecipe(
    fields=("additionalCharges",) + _RESPONSE_FIELDS,
    algorithm=DigestAlgorithm.SHA512,
    separator="|",
)


class Helper(BaseHelper):
    integration_name = NAME
    mapping = MAPPING
    required_fields = (
        "account",
        "order",
        "amount",
        "description",
        "customer.first_name",
        "customer.email",
    )
    service_urls = SERVICE_URLS
    recipe = REQUEST_RECIPE
    signature_field = "hash"
    signs_requests = True

    def set_currency(self, currency):
        if self.currency_code(currency) != CURRENCY:
            raise ValueError(f"PayU India only accepts {CURRENCY}, got {currency}")

    def user_defined(self, **values: Any) -> None:
        """Set any of ``udf1`` to ``udf10``."""
        self.set("user_defined", values)


class Notification(BaseNotification):
    integration_name = NAME
    content_types = (FORM, JSON)
    fields = NotificationFields(
        transaction_id="mihpayid",
        item_id="txnid",
        gross="amount",
        status="status",
        payer_email="email",
        signature="hash",
    )
    status_table = STATUSES

    @property
    def recipe(self) -> SignatureRecipe:
        if self.param("additionalCharges"):
            return RESPONSE_WITH_CHARGES_RECIPE
        return RESPONSE_RECIPE

    @property
    def currency(self) -> str:
        return CURRENCY

    @property
    def invoice(self):
        return self.item_id

    @property
    def account(self):
        return self.param("key")

    @property
    def discount(self) -> Decimal:
        return parse_amount(self.param("discount")) or Decimal("0")

    @property
    def additional_charges(self) -> Decimal:
        return parse_amount(self.param("additionalCharges")) or Decimal("0")

    @property
    def offer_description(self):
        return self.param("offer")

    @property
    def payment_mode(self):
        return self.param("mode")

    @property
    def bank_reference(self):
        return self.param("bank_ref_num")

    @property
    def product_info(self):
        return self.param("productinfo")

    @property
    def customer_first_name(self):
        return self.param("firstname")

    @property
    def customer_last_name(self):
        return self.param("lastname")

    @property
    def customer_phone(self):
        return self.param("phone")

    @property
    def user_defined(self) -> List[Optional[str]]:
        return [self.param(name) for name in USER_DEFINED_FIELDS]

    @property
    def message(self) -> Optional[str]:
        return self.param("error_Message")

    def amount_ok(self, order_amount: Any, order_discount: Any = Decimal("0")) -> bool:
        """Check the paid amount and discount against the merchant's order."""
        amount = self.amount
        if amount is None:
            return False
        return amount == to_decimal(order_amount) and self.discount == to_decimal(order_discount)

    def acknowledge(self) -> bool:
        expected_key = self.config.account
        if expected_key and self.account != expected_key:
            logger.warning(
                "PayU India response for %s carries merchant key %s", self.item_id, self.account
            )
            return False
        return super().acknowledge()


class Return(NotificationReturn):
    notification_class = Notification
    message_field = "error_Message"


__all__ = ["NAME", "Helper", "Notification", "Return"]
