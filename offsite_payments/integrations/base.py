"""Base classes shared by every offsite payment integration.

An integration is made of up to three roles:

* :class:`Helper` builds the outbound request that sends the customer to the
  provider's hosted payment page.
* :class:`Notification` parses and verifies the provider's server-to-server
  callback.
* :class:`Return` reads the redirect the customer's browser makes on the way
  back.

Each provider subclasses these and fills in plain class-level data: a
:class:`FieldMapping`, a :class:`NotificationFields` record, a
:class:`StatusTable` and a :class:`SignatureRecipe`.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from functools import cached_property
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

from ..config import IntegrationMode, ProviderConfig
from ..exceptions import ConfigurationError, MissingRequiredField, UnknownField
from .mapping import FieldMapping
from .money import format_amount, parse_amount, to_decimal, validate_amount, validate_currency_code
from .payload import FORM, parse_payload
from .signatures import SignatureRecipe
from .status import CanonicalStatus, StatusTable

logger = logging.getLogger(__name__)


class BlankPolicy(str, Enum):
    """What a Helper does with ``None`` or empty values."""

    OMIT = "omit"
    PASS_THROUGH = "pass_through"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ==================== Outbound ====================

class Helper:
    """Accumulates request fields for one checkout attempt.

    Subclasses declare:

    * ``mapping``: canonical to wire field names
    * ``required_fields``: canonical names that must be present to render
    * ``blank_policy``: how empty values are handled
    * ``service_urls``: hosted page URL per :class:`IntegrationMode`
    * ``recipe`` and ``signature_field`` when requests are signed
    """

    integration_name = "base"
    mapping: FieldMapping = FieldMapping().freeze()
    required_fields: Tuple[str, ...] = ()
    blank_policy: BlankPolicy = BlankPolicy.OMIT
    service_urls: Dict[IntegrationMode, str] = {}
    recipe: Optional[SignatureRecipe] = None
    signature_field: Optional[str] = None
    signs_requests = False

    def __init__(
        self,
        order: str,
        config: ProviderConfig,
        *,
        amount: Any = None,
        currency: Optional[str] = None,
        blank_policy: Optional[BlankPolicy] = None,
        **options: Any,
    ) -> None:
        """Start a request for ``order``.

        Args:
            order: Merchant order reference
            config: Provider credentials; ``config.account`` fills the
                ``account`` canonical when the provider declares one
            amount: Order total
            currency: Three-letter currency code
            blank_policy: Override of the provider's blank policy
            **options: Provider-specific options
        """
        self.config = config
        self.options = options
        if blank_policy is not None:
            self.blank_policy = BlankPolicy(blank_policy)
        self.fields: Dict[str, str] = {}
        self.raw_fields: List[Tuple[str, str]] = []

        self.set("order", order)
        if "account" in self.mapping:
            self.set("account", config.account)
        if amount is not None:
            self.set_amount(amount)
        if currency is not None:
            self.set_currency(currency)

    def add_field(self, wire_name: str, value: Any) -> None:
        """Store ``value`` under ``wire_name``, applying the blank policy."""
        if not wire_name:
            return
        if _is_blank(value):
            if self.blank_policy is BlankPolicy.OMIT:
                self.fields.pop(wire_name, None)
                return
            value = ""
        self.fields[wire_name] = str(value)

    def add_raw_field(self, wire_name: str, value: Any) -> None:
        """Append a field that may repeat, such as a line item."""
        self.raw_fields.append((wire_name, "" if value is None else str(value)))

    def set(self, canonical_name: str, value: Any) -> None:
        """Store ``value`` under the wire name mapped for ``canonical_name``.

        A dict value sets each sub-field of a grouped canonical, e.g.
        ``set("customer", {"email": "a@b.c"})``.

        Raises:
            UnknownField: If the canonical (or a sub-field) is undeclared
        """
        if isinstance(value, Mapping):
            group = self.mapping.group(canonical_name)
            for sub_name, sub_value in value.items():
                if sub_name not in group:
                    raise UnknownField(f"Undeclared field: {canonical_name}.{sub_name}")
                self.add_field(group[sub_name], sub_value)
            return
        self.add_field(self.mapping.wire_name_for(canonical_name), value)

    def set_amount(self, amount: Any) -> None:
        """Raises ValueError unless ``amount`` is a positive, finite number."""
        formatted = format_amount(amount)
        if not validate_amount(to_decimal(formatted)):
            raise ValueError(f"Amount must be positive: {amount!r}")
        self.set("amount", formatted)

    def currency_code(self, currency: Any) -> str:
        """Upper-case ``currency`` and check it is a three-letter ISO 4217 code."""
        code = currency.strip().upper() if isinstance(currency, str) else currency
        if not validate_currency_code(code):
            raise ValueError(f"Invalid currency code: {currency!r}")
        return code

    def set_currency(self, currency: str) -> None:
        self.set("currency", self.currency_code(currency))

    def get(self, canonical_name: str) -> Optional[str]:
        return self.fields.get(self.mapping.wire_name_for(canonical_name))

    def validate(self) -> None:
        """Raise MissingRequiredField for the first absent required field."""
        for canonical_name in self.required_fields:
            wire_name = self.mapping.wire_name_for(canonical_name)
            if not self.fields.get(wire_name):
                raise MissingRequiredField(canonical_name, wire_name)

    def signing_secret(self) -> str:
        return self.config.require("secret")

    def signature_values(self) -> Mapping[str, Any]:
        return self.fields

    def sign(self) -> str:
        """Compute the request signature and store it as the last field."""
        if self.recipe is None or not self.signature_field:
            raise ConfigurationError(f"{self.integration_name} does not sign requests")
        self.fields.pop(self.signature_field, None)
        signature = self.recipe.sign(self.signature_values(), self.signing_secret())
        self.fields[self.signature_field] = signature
        return signature

    def form_fields(self) -> List[Tuple[str, str]]:
        """Return ``(wire_name, value)`` pairs for hidden form inputs.

        Raises:
            MissingRequiredField: If a required field was never set
        """
        self.validate()
        if self.signs_requests:
            self.sign()
        return list(self.fields.items()) + list(self.raw_fields)

    def query_string(self) -> str:
        return urlencode(self.form_fields())

    @property
    def service_url(self) -> str:
        try:
            return self.service_urls[self.config.mode]
        except KeyError:
            raise ConfigurationError(
                f"{self.integration_name} has no service URL for mode {self.config.mode.value}"
            ) from None

    def redirect_url(self) -> str:
        """Service URL with the request encoded as a GET query string."""
        return f"{self.service_url}?{self.query_string()}"


# ==================== Inbound ====================

@dataclass(frozen=True)
class NotificationFields:
    """Wire names a provider uses for the canonical notification accessors."""

    transaction_id: Optional[str] = None
    item_id: Optional[str] = None
    gross: Optional[str] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    received_at: Optional[str] = None
    payer_email: Optional[str] = None
    receiver_email: Optional[str] = None
    signature: Optional[str] = None
    test: Optional[str] = None


class Notification:
    """Read-only view over one provider callback payload."""

    integration_name = "base"
    fields = NotificationFields()
    content_types: Tuple[str, ...] = (FORM,)
    status_table: Optional[StatusTable] = None
    absent_status = CanonicalStatus.UNKNOWN
    recipe: Optional[SignatureRecipe] = None
    acknowledge_requires_completed = False
    received_at_format: Optional[str] = None
    response_body: Optional[str] = None

    def __init__(
        self,
        raw_body: Any,
        content_type: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.raw = raw_body
        self.params = self.parse(raw_body, content_type)

    def parse(self, raw_body: Any, content_type: Optional[str] = None) -> Mapping[str, str]:
        """Decode the body into the notification payload.

        Raises:
            MalformedPayload: If the body cannot be decoded
        """
        return parse_payload(raw_body, content_type, self.content_types)

    def param(self, wire_name: Optional[str]) -> Optional[str]:
        if not wire_name:
            return None
        return self.params.get(wire_name)

    @property
    def transaction_id(self) -> Optional[str]:
        return self.param(self.fields.transaction_id)

    @property
    def item_id(self) -> Optional[str]:
        return self.param(self.fields.item_id)

    @property
    def order_id(self) -> Optional[str]:
        return self.item_id

    @property
    def gross(self) -> Optional[str]:
        """Amount exactly as the provider sent it."""
        return self.param(self.fields.gross)

    @property
    def amount(self) -> Optional[Decimal]:
        return parse_amount(self.gross)

    @property
    def currency(self) -> Optional[str]:
        return self.param(self.fields.currency)

    @property
    def received_at(self) -> Optional[datetime]:
        value = self.param(self.fields.received_at)
        if not value:
            return None
        try:
            if self.received_at_format:
                return datetime.strptime(value, self.received_at_format)
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Unparseable %s timestamp: %s", self.integration_name, value)
            return None

    @property
    def payer_email(self) -> Optional[str]:
        return self.param(self.fields.payer_email)

    @property
    def receiver_email(self) -> Optional[str]:
        return self.param(self.fields.receiver_email)

    @property
    def test(self) -> bool:
        value = self.param(self.fields.test)
        return (value or "").strip().lower() in ("1", "true", "yes", "y")

    @property
    def status_code(self) -> Optional[str]:
        return self.param(self.fields.status)

    @cached_property
    def status(self) -> CanonicalStatus:
        code = self.status_code
        if code is None:
            return self.absent_status
        if self.status_table is None:
            return CanonicalStatus.UNKNOWN
        return self.status_table.resolve(code)

    @property
    def is_complete(self) -> bool:
        return self.status is CanonicalStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status is CanonicalStatus.PENDING

    @property
    def is_canceled(self) -> bool:
        return self.status is CanonicalStatus.CANCELED

    @property
    def is_failed(self) -> bool:
        return self.status is CanonicalStatus.FAILED

    @property
    def is_chargeback(self) -> bool:
        return self.status is CanonicalStatus.CHARGEBACK

    @property
    def signature(self) -> Optional[str]:
        """Signature delivered in the payload."""
        return self.param(self.fields.signature)

    @property
    def required_credentials(self) -> Tuple[str, ...]:
        """Credentials :meth:`acknowledge` needs to verify a notification."""
        return ("secret",) if self.recipe is not None else ()

    def check_configuration(self) -> None:
        """Raise ConfigurationError if a credential needed to verify is missing."""
        for name in self.required_credentials:
            self.config.require(name)

    def signing_secret(self) -> str:
        return self.config.require("secret")

    def signature_values(self) -> Mapping[str, Any]:
        return self.params

    def expected_signature(self) -> Optional[str]:
        if self.recipe is None:
            return None
        return self.recipe.sign(self.signature_values(), self.signing_secret())

    def acknowledge(self) -> bool:
        """Verify the notification before its contents are trusted.

        Never raises. A missing credential is logged and the notification
        is not acknowledged.

        Returns:
            True if the recomputed signature matches the delivered one (or the
            provider does not sign notifications) and, for providers that
            require it, the canonical status is ``completed``
        """
        if self.recipe is not None:
            try:
                verified = self.recipe.verify(
                    self.signature_values(), self.signing_secret(), self.signature
                )
            except ConfigurationError as exc:
                logger.error(
                    "Cannot verify %s notification for item %s: %s",
                    self.integration_name,
                    self.item_id,
                    exc,
                )
                return False
            if not verified:
                logger.warning(
                    "Signature mismatch on %s notification for item %s",
                    self.integration_name,
                    self.item_id,
                )
                return False

        if self.acknowledge_requires_completed and not self.is_complete:
            logger.info(
                "%s notification for item %s not acknowledged: status %s",
                self.integration_name,
                self.item_id,
                self.status.value,
            )
            return False
        return True


# ==================== Return ====================

class Return:
    """Redirect-back request made by the customer's browser."""

    content_types: Tuple[str, ...] = (FORM,)

    def __init__(
        self,
        raw_body: Any,
        content_type: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self.config = config or ProviderConfig()
        self.params = parse_payload(raw_body, content_type, self.content_types)

    @property
    def success(self) -> bool:
        return True

    @property
    def cancelled(self) -> bool:
        return False

    @property
    def message(self) -> Optional[str]:
        return None


class NotificationReturn(Return):
    """Return whose parameters are a full, signed notification payload."""

    notification_class = Notification
    message_field: Optional[str] = None

    def __init__(
        self,
        raw_body: Any,
        content_type: Optional[str] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self.content_types = self.notification_class.content_types
        super().__init__(raw_body, content_type, config)
        self.notification = self.notification_class(self.params, config=self.config)

    @property
    def success(self) -> bool:
        return self.notification.acknowledge() and self.notification.is_complete

    @property
    def cancelled(self) -> bool:
        return self.notification.is_canceled

    @property
    def message(self) -> Optional[str]:
        if not self.message_field:
            return None
        return self.params.get(self.message_field)
