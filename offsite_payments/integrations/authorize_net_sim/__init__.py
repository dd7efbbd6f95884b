"""Authorize.Net Server Integration Method (SIM).

Credentials: ``account`` is the API login ID, ``credential2`` the
transaction key used for the request fingerprint, and ``secret`` the MD5
hash value set in the merchant interface, used to verify relay responses.

Call :meth:`Helper.setup_hash` before rendering, and :meth:`Helper.invoice`
so the relay response can be matched back to the order.
"""

import time
from typing import Any, Dict, Mapping, Optional

from ...config import IntegrationMode
from ...exceptions import MissingRequiredField
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields
from ..mapping import FieldMapping
from ..money import format_amount, to_decimal
from ..signatures import SECRET, DigestAlgorithm, SignatureRecipe, hmac_digest
from ..status import CanonicalStatus, StatusTable

NAME = "authorize_net_sim"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://test.authorize.net/gateway/transact.dll",
    IntegrationMode.PRODUCTION: "https://secure.authorize.net/gateway/transact.dll",
}

LINE_ITEM_FIELD = "x_line_item"
LINE_ITEM_SEPARATOR = "<|>"
# The payment form does not display more than this many line items.
MAX_DISPLAYED_LINE_ITEMS = 30
UNSHOWN_ITEMS_NOTE = " + more unshown items after this one."

MAPPING = FieldMapping({
    "order": "x_fp_sequence",
    "account": "x_login",
    "amount": "x_amount",
    "currency": "x_currency_code",
    "customer": {
        "first_name": "x_first_name",
        "last_name": "x_last_name",
        "email": "x_email",
        "phone": "x_phone",
    },
    "notify_url": "x_relay_url",
    "fax": "x_fax",
    "customer_id": "x_cust_id",
    "description": "x_description",
    "tax": "x_tax",
    "shipping": "x_freight",
    "test_request": "x_test_request",
    "color_link": "x_color_link",
    "color_text": "x_color_text",
    "logo_url": "x_logo_url",
    "background_url": "x_background_url",
    "payment_header": "x_header_html_payment_form",
    "payment_footer": "x_footer_html_payment_form",
}).freeze()

STATUSES = StatusTable({
    "1": CanonicalStatus.COMPLETED,
    "2": CanonicalStatus.FAILED,
    "3": CanonicalStatus.FAILED,
    "4": CanonicalStatus.PENDING,
})

RESPONSE_CODES = {"1": "approved", "2": "declined", "3": "error", "4": "held_for_review"}

RECIPE = SignatureRecipe(
    fields=(SECRET, "x_login", "x_trans_id", "x_amount"),
    algorithm=DigestAlgorithm.MD5,
)


def _joined_address(address: Mapping[str, Any]) -> str:
    if "address" in address:
        raise ValueError("Use address1 and address2 instead of address")
    return f"{address.get('address1') or ''} {address.get('address2') or ''}".strip()


class Helper(BaseHelper):
    integration_name = NAME
    mapping = MAPPING
    required_fields = ("account", "order", "amount")
    service_urls = SERVICE_URLS

    def __init__(self, order, config, **kwargs):
        super().__init__(order, config, **kwargs)
        self.add_field("x_type", "AUTH_CAPTURE")
        self.add_field("x_show_form", "PAYMENT_FORM")
        self.add_field("x_relay_response", "TRUE")
        self.add_field("x_duplicate_window", "28800")
        self.add_field("x_version", "3.1")
        self.line_item_count = 0

    def invoice(self, number: Any) -> None:
        """Set the invoice number echoed back in the relay response."""
        self.add_field("x_invoice_num", number)

    def billing_address(self, address: Mapping[str, Any]) -> None:
        for setting in ("city", "state", "zip", "country", "po_num"):
            self.add_field(f"x_{setting}", address.get(setting))
        self.add_field("x_address", _joined_address(address))

    def ship_to_address(self, address: Mapping[str, Any]) -> None:
        for setting in ("first_name", "last_name", "company", "city", "state", "zip", "country"):
            if address.get(setting):
                self.add_field(f"x_ship_to_{setting}", address[setting])
        self.add_field("x_ship_to_address", _joined_address(address))

    def add_custom_field(self, name: str, value: Any) -> None:
        """Add a merchant field that Authorize.Net passes back verbatim."""
        self.add_field(name, value)

    def email_customer_from_gateway(self) -> None:
        self.add_field("x_email_customer", "TRUE")

    def email_merchant_from_gateway(self, email: str) -> None:
        self.add_field("x_email_merchant", email)

    def add_line_item(
        self,
        name: str,
        quantity: int = 1,
        unit_price: Any = 0,
        tax_value: str = "N",
        line_title: Optional[str] = None,
    ) -> None:
        """Append an ``x_line_item`` field.

        Raises:
            ValueError: If the name is empty or contains a reserved delimiter,
                or the unit price is negative
        """
        if not name:
            raise ValueError("Line item needs a name")
        if LINE_ITEM_SEPARATOR in name:
            raise ValueError(f"Line item name cannot contain {LINE_ITEM_SEPARATOR}")
        if '"' in name:
            raise ValueError('Line item name cannot contain "')
        if "$" in str(unit_price):
            raise ValueError("Line item price cannot contain a dollar sign")
        price = to_decimal(unit_price)
        if price < 0:
            raise ValueError("Line item price must be zero or positive")

        if self.line_item_count == MAX_DISPLAYED_LINE_ITEMS:
            self._mark_unshown_items()

        title = line_title or f"Item {self.line_item_count + 1}"
        parts = (title, name[:31], name[:256], str(quantity), format_amount(price), str(tax_value))
        self.add_raw_field(LINE_ITEM_FIELD, LINE_ITEM_SEPARATOR.join(parts))
        self.line_item_count += 1

    def _mark_unshown_items(self) -> None:
        wire_name, value = self.raw_fields[-1]
        parts = value.split(LINE_ITEM_SEPARATOR)
        parts[2] = parts[2][:201] + UNSHOWN_ITEMS_NOTE
        self.raw_fields[-1] = (wire_name, LINE_ITEM_SEPARATOR.join(parts))

    def add_tax_as_line_item(self) -> None:
        """Show the tax amount as a line item; the form hides it otherwise."""
        tax = self.get("tax")
        if tax is None:
            raise MissingRequiredField("tax", self.mapping.wire_name_for("tax"))
        self.add_line_item("Total Tax", quantity=1, unit_price=tax, line_title="Tax")

    def add_shipping_as_line_item(self, **options: Any) -> None:
        shipping = self.get("shipping")
        if shipping is None:
            raise MissingRequiredField("shipping", self.mapping.wire_name_for("shipping"))
        options.setdefault("line_title", "Shipping")
        self.add_line_item("Shipping and Handling Cost", quantity=1, unit_price=shipping, **options)

    def fingerprint_message(self, order_timestamp: int) -> str:
        return "^".join((
            self.fields.get("x_login", ""),
            self.fields.get("x_fp_sequence", ""),
            str(int(order_timestamp)),
            self.fields.get("x_amount", ""),
            self.fields.get("x_currency_code", ""),
        ))

    def setup_hash(self, transaction_key: Optional[str] = None, order_timestamp: Optional[int] = None) -> str:
        """Add the HMAC-MD5 request fingerprint.

        Args:
            transaction_key: Defaults to ``config.credential2``
            order_timestamp: Unix time of the request; defaults to now

        Returns:
            The fingerprint stored in ``x_fp_hash``
        """
        if transaction_key is None:
            transaction_key = self.config.require("credential2")
        if order_timestamp is None:
            order_timestamp = int(time.time())
        if not self.fields.get("x_amount"):
            raise MissingRequiredField("amount", "x_amount")

        fingerprint = hmac_digest(
            self.fingerprint_message(order_timestamp), transaction_key, DigestAlgorithm.MD5
        )
        self.add_field("x_fp_hash", fingerprint)
        self.add_field("x_fp_timestamp", int(order_timestamp))
        return fingerprint


class Notification(BaseNotification):
    integration_name = NAME
    fields = NotificationFields(
        transaction_id="x_trans_id",
        item_id="x_invoice_num",
        gross="x_amount",
        status="x_response_code",
        payer_email="x_email",
        signature="x_MD5_Hash",
        test="x_test_request",
    )
    status_table = STATUSES
    recipe = RECIPE
    required_credentials = ("secret", "account")

    def signature_values(self) -> Mapping[str, Any]:
        # The relay response does not echo the login, which is part of the hash.
        return dict(self.params, x_login=self.config.require("account"))

    @property
    def response_code(self) -> Optional[str]:
        return RESPONSE_CODES.get(self.status_code or "")

    @property
    def response_reason_code(self):
        return self.param("x_response_reason_code")

    @property
    def response_reason_text(self):
        return self.param("x_response_reason_text")

    @property
    def response_subcode(self):
        return self.param("x_response_subcode")

    @property
    def invoice_num(self):
        return self.item_id

    @property
    def customer_id(self):
        return self.param("x_cust_id")

    @property
    def auth_code(self):
        return self.param("x_auth_code")

    @property
    def po_num(self):
        return self.param("x_po_num")

    @property
    def transaction_type(self):
        return self.param("x_type")

    @property
    def payment_method(self):
        return self.param("x_method")

    @property
    def description(self):
        return self.param("x_description")

    @property
    def tax(self):
        return self.param("x_tax")

    @property
    def tax_exempt(self):
        return self.param("x_tax_exempt")

    @property
    def duty(self):
        return self.param("x_duty")

    @property
    def freight(self):
        return self.param("x_freight")

    shipping = freight

    @property
    def billing_address(self) -> Dict[str, Optional[str]]:
        keys = ("fax", "city", "company", "last_name", "country", "zip",
                "first_name", "address", "email", "state")
        return {key: self.param(f"x_{key}") for key in keys}

    @property
    def ship_to_address(self) -> Dict[str, Optional[str]]:
        keys = ("city", "last_name", "first_name", "country", "zip", "address")
        return {key: self.param(f"x_ship_to_{key}") for key in keys}

    @property
    def custom_values(self) -> Dict[str, str]:
        """Merchant fields passed back verbatim (anything not prefixed ``x_``)."""
        return {key: value for key, value in self.params.items() if not key.startswith("x_")}

    @property
    def avs_code(self):
        return self.param("x_avs_code")

    @property
    def avs_code_matches(self) -> bool:
        """True for a full address match, or when AVS does not apply."""
        return self.avs_code in ("Y", "X", "P")

    @property
    def cvv2_resp_code(self):
        return self.param("x_cvv2_resp_code")

    @property
    def cvv2_resp_code_matches(self) -> bool:
        return self.cvv2_resp_code == "M"

    @property
    def cavv_response(self):
        return self.param("x_cavv_response")

    @property
    def cavv_matches(self) -> bool:
        return (self.cavv_response or "") in ("", "2", "8")


__all__ = ["NAME", "Helper", "Notification", "RECIPE"]
