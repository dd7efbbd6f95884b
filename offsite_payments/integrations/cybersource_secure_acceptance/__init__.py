"""CyberSource Secure Acceptance (hosted checkout and silent order POST).

Credentials: ``account`` is the profile's access key, ``credential2`` the
profile ID and ``secret`` the secret key. Every request and response is
signed with HMAC-SHA256 over the fields listed in ``signed_field_names``.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from ...config import IntegrationMode
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields, NotificationReturn
from ..mapping import FieldMapping
from ..money import cents_to_amount, currency_exponent, format_amount, to_decimal
from ..signatures import SignedFieldNamesRecipe
from ..status import CanonicalStatus, StatusTable

NAME = "cybersource_secure_acceptance"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://testsecureacceptance.cybersource.com",
    IntegrationMode.PRODUCTION: "https://secureacceptance.cybersource.com",
}

ENDPOINT_PATHS = {
    "pay": "pay",
    "oneclick": "oneclick/pay",
    "create_token": "token/create",
    "update_token": "token/update",
    "silent_order": "silent/pay",
}

TRANSACTION_TYPES = (
    "authorization",
    "sale",
    "create_payment_token",
    "update_payment_token",
    "authorization,create_payment_token",
    "sale,create_payment_token",
    "authorization,update_payment_token",
    "sale,update_payment_token",
)

ITEM_CODES = (
    "default",
    "adult_content",
    "coupon",
    "electronic_good",
    "electronic_software",
    "gift_certificate",
    "handling_only",
    "service",
    "shipping_and_handling",
    "shipping_only",
    "subscription",
)

# These codes need a quantity and SKU.
EXTRA_INFO_ITEM_CODES = (
    "adult_content",
    "coupon",
    "electronic_good",
    "electronic_software",
    "gift_certificate",
    "service",
    "subscription",
)

MAX_LINE_ITEMS = 50

MAPPING = FieldMapping({
    "account": "access_key",
    "profile_id": "profile_id",
    "return_url": "override_custom_receipt_page",
    "cancel_return_url": "override_custom_cancel_page",
    "order": "reference_number",
    "amount": "amount",
    "tax": "tax_amount",
    "currency": "currency",
    "payment_method": "payment_method",
    "transaction_type": "transaction_type",
    "transaction_uuid": "transaction_uuid",
    "signed_date_time": "signed_date_time",
    "skip_decision_manager": "skip_decision_manager",
    "payment_token": "payment_token",
    "payment_token_comments": "payment_token_comments",
    "payment_token_title": "payment_token_title",
    "recurring": {
        "amount": "recurring_amount",
        "frequency": "recurring_frequency",
        "number_of_installments": "recurring_number_of_installments",
        "start_date": "recurring_start_date",
    },
    "locale": "locale",
    "customer": {
        "first_name": "bill_to_forename",
        "last_name": "bill_to_surname",
        "email": "bill_to_email",
        "phone": "bill_to_phone",
        "ip_address": "customer_ip_address",
    },
    "billing_address": {
        "city": "bill_to_address_city",
        "address1": "bill_to_address_line1",
        "address2": "bill_to_address_line2",
        "state": "bill_to_address_state",
        "zip": "bill_to_address_postal_code",
        "country": "bill_to_address_country",
        "company": "bill_to_company_name",
        "company_tax_id": "company_tax_id",
    },
}).freeze()

STATUSES = StatusTable({
    "ACCEPT": CanonicalStatus.COMPLETED,
    "REVIEW": CanonicalStatus.PENDING,
    "DECLINE": CanonicalStatus.FAILED,
    "ERROR": CanonicalStatus.FAILED,
    "CANCEL": CanonicalStatus.CANCELED,
}, case_sensitive=False)

RECIPE = SignedFieldNamesRecipe()


def signed_date_time(now: Optional[datetime] = None) -> str:
    """UTC timestamp in the ``yyyy-MM-dd'T'HH:mm:ss'Z'`` form CyberSource expects."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%SZ")


def _cents_total(cents: Any, quantity: int = 1, exponent: int = 2) -> str:
    return format_amount(cents_to_amount(cents, exponent) * quantity, exponent)


class Helper(BaseHelper):
    """Secure Acceptance request.

    Amounts (order total, line item prices and taxes) are given as a whole
    number of the currency's minor units (cents for USD, yen for JPY) and
    sent as decimal strings with the currency's number of places.
    """

    integration_name = NAME
    mapping = MAPPING
    required_fields = ("account", "profile_id", "order", "amount", "currency")
    service_urls = SERVICE_URLS
    recipe = RECIPE
    signature_field = "signature"
    signs_requests = True

    def __init__(self, order, config, *, currency=None, **kwargs):
        self.exponent = currency_exponent(currency)
        super().__init__(order, config, currency=currency, **kwargs)
        self.set("profile_id", config.credential2)
        self.set("locale", self.options.get("locale") or "en")

        self.endpoint = self.options.get("endpoint") or "pay"
        if self.endpoint not in ENDPOINT_PATHS:
            raise ValueError(f"Invalid endpoint: {self.endpoint}")

        transaction_type = self.options.get("transaction_type") or "authorization"
        if transaction_type not in TRANSACTION_TYPES:
            raise ValueError(f"Invalid transaction_type: {transaction_type}")
        self.set("transaction_type", transaction_type)
        self.set("transaction_uuid", self.options.get("transaction_uuid") or uuid.uuid4().hex)
        self.set("signed_date_time", self.options.get("signed_date_time") or signed_date_time())

        self.line_item_count = 0
        self.additional_line_item_count = 0

    def set_amount(self, cents):
        self.set("amount", _cents_total(cents, exponent=self.exponent))

    @property
    def endpoint_path(self) -> str:
        return ENDPOINT_PATHS[self.endpoint]

    @property
    def service_url(self) -> str:
        return f"{super().service_url}/{self.endpoint_path}"

    def add_line_item(
        self,
        name: str,
        code: Optional[str] = None,
        quantity: Optional[int] = None,
        sku: Optional[str] = None,
        tax_amount: Any = None,
        unit_price: Any = None,
    ) -> None:
        """Add an ``item_<n>_*`` group; prices and taxes are in cents.

        CyberSource accepts at most 50 line items, so the 50th and later
        items are folded into item 49, keeping the totals correct.

        Raises:
            ValueError: For a missing name, an unknown item code, or a code
                that needs a quantity and SKU without them
        """
        if not name:
            raise ValueError("Line item needs a name")
        name = name[:256]
        if sku:
            sku = sku[:256]
        if code:
            if code not in ITEM_CODES:
                raise ValueError(f"Invalid item code: {code}")
            if code in EXTRA_INFO_ITEM_CODES and (not quantity or not sku):
                raise ValueError(f"quantity and sku are required for item code {code!r}")

        if self.line_item_count >= MAX_LINE_ITEMS - 1:
            self._fold_line_item(quantity or 1, tax_amount, unit_price)
            return

        index = self.line_item_count
        self.add_field(f"item_{index}_name", name)
        if tax_amount is not None:
            self.add_field(f"item_{index}_tax_amount", _cents_total(tax_amount, exponent=self.exponent))
        if unit_price is not None:
            self.add_field(f"item_{index}_unit_price", _cents_total(unit_price, exponent=self.exponent))
        self.add_field(f"item_{index}_code", code)
        self.add_field(f"item_{index}_quantity", quantity)
        self.add_field(f"item_{index}_sku", sku)
        self.line_item_count += 1

    def _fold_line_item(self, quantity: int, tax_amount: Any, unit_price: Any) -> None:
        index = MAX_LINE_ITEMS - 1
        first_fold = self.line_item_count == index
        self.additional_line_item_count = 1 if first_fold else self.additional_line_item_count + 1
        self.add_field(
            f"item_{index}_name",
            f"There are {self.additional_line_item_count} additional line item(s)...",
        )

        for suffix, cents in (("tax_amount", tax_amount), ("unit_price", unit_price)):
            if cents is None:
                continue
            total = cents_to_amount(cents, self.exponent) * quantity
            if not first_fold:
                total += to_decimal(self.fields.get(f"item_{index}_{suffix}") or "0")
            self.add_field(f"item_{index}_{suffix}", format_amount(total, self.exponent))

        if first_fold:
            self.add_field(f"item_{index}_code", "default")
            self.add_field(f"item_{index}_quantity", 1)
        self.line_item_count = MAX_LINE_ITEMS

    def signed_field_names(self) -> str:
        names = [name for name in self.fields if name not in ("signed_field_names", self.signature_field)]
        return ",".join(sorted(names + ["signed_field_names"]))

    def sign(self) -> str:
        if self.line_item_count:
            self.add_field("line_item_count", self.line_item_count)
        # Every posted field must be listed in one of the two name lists.
        self.fields["unsigned_field_names"] = ""
        self.fields.pop(self.signature_field, None)
        self.fields["signed_field_names"] = self.signed_field_names()
        return super().sign()


class Notification(BaseNotification):
    integration_name = NAME
    fields = NotificationFields(
        transaction_id="transaction_id",
        item_id="req_reference_number",
        gross="req_amount",
        currency="req_currency",
        status="decision",
        received_at="signed_date_time",
        payer_email="req_bill_to_email",
        signature="signature",
    )
    status_table = STATUSES
    recipe = RECIPE
    received_at_format = "%Y-%m-%dT%H:%M:%SZ"

    @property
    def reason_code(self):
        return self.param("reason_code")

    @property
    def message(self):
        return self.param("message")

    @property
    def auth_code(self):
        return self.param("auth_code")

    @property
    def auth_amount(self):
        return self.param("auth_amount")

    @property
    def transaction_uuid(self):
        return self.param("req_transaction_uuid")

    @property
    def transaction_type(self):
        return self.param("req_transaction_type")

    @property
    def payment_token(self):
        return self.param("payment_token")

    @property
    def signed_field_names(self):
        return self.param("signed_field_names")


class Return(NotificationReturn):
    notification_class = Notification
    message_field = "message"


__all__ = ["NAME", "Helper", "Notification", "Return", "RECIPE"]
