"""PayDollar (AsiaPay) client post and datafeed.

Credentials: ``account`` is the merchant ID and ``secret`` the secure hash
secret. The secure hash is optional on PayDollar's side; without a secret,
requests go out unsigned and datafeeds are accepted on status alone.
"""

import logging
from typing import Optional

from ...config import IntegrationMode
from ..base import Helper as BaseHelper
from ..base import Notification as BaseNotification
from ..base import NotificationFields
from ..mapping import FieldMapping
from ..money import alpha_currency_code, numeric_currency_code
from ..signatures import SECRET, DigestAlgorithm, SignatureRecipe
from ..status import CanonicalStatus, StatusTable

logger = logging.getLogger(__name__)

NAME = "paydollar"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://test.paydollar.com/b2cDemo/eng/payment/payForm.jsp",
    IntegrationMode.PRODUCTION: "https://www.paydollar.com/b2c2/eng/payment/payForm.jsp",
}

MAPPING = FieldMapping({
    "account": "merchantId",
    "order": "orderRef",
    "amount": "amount",
    "currency": "currCode",
    "language": "lang",
    "description": "remark",
    "return_url": "successUrl",
    "failure_url": "failUrl",
    "cancel_return_url": "cancelUrl",
    "payment_type": "payType",
    "payment_method": "payMethod",
}).freeze()

STATUSES = StatusTable({
    "0": CanonicalStatus.COMPLETED,
    "1": CanonicalStatus.FAILED,
})

REQUEST_RECIPE = SignatureRecipe(
    fields=("merchantId", "orderRef", "currCode", "amount", "payType", SECRET),
    algorithm=DigestAlgorithm.SHA1,
    separator="|",
)

DATAFEED_RECIPE = SignatureRecipe(
    fields=("src", "prc", "successcode", "Ref", "PayRef", "Cur", "Amt", "payerAuth", SECRET),
    algorithm=DigestAlgorithm.SHA1,
    separator="|",
    uppercase=True,
)


class Helper(BaseHelper):
    integration_name = NAME
    mapping = MAPPING
    required_fields = ("account", "order", "amount", "currency", "return_url",
                       "failure_url", "cancel_return_url")
    service_urls = SERVICE_URLS
    recipe = REQUEST_RECIPE
    signature_field = "secureHash"

    def __init__(self, order, config, **kwargs):
        super().__init__(order, config, **kwargs)
        self.set("payment_type", self.options.get("payment_type", "N"))
        self.set("payment_method", self.options.get("payment_method", "ALL"))
        self.set("language", self.options.get("language", "E"))

    @property
    def signs_requests(self):
        return bool(self.config.secret)

    def set_currency(self, currency):
        self.set("currency", numeric_currency_code(self.currency_code(currency)))


class Notification(BaseNotification):
    integration_name = NAME
    fields = NotificationFields(
        transaction_id="PayRef",
        item_id="Ref",
        gross="Amt",
        currency="Cur",
        status="successcode",
        received_at="TxTime",
        signature="secureHash",
    )
    status_table = STATUSES
    recipe = DATAFEED_RECIPE
    acknowledge_requires_completed = True
    received_at_format = "%Y-%m-%d %H:%M:%S.%f"
    response_body = "OK"
    # The secure hash is optional; without a secret datafeeds are accepted on status.
    required_credentials = ()

    @property
    def primary_bank_host_status_code(self):
        return self.param("prc")

    @property
    def secondary_bank_host_status_code(self):
        return self.param("src")

    @property
    def bank_reference_order_id(self):
        return self.param("Ord")

    @property
    def holder_name(self):
        return self.param("Holder")

    @property
    def approval_code(self):
        return self.param("AuthId")

    @property
    def payer_auth_status(self):
        return self.param("payerAuth")

    @property
    def payer_ip(self):
        return self.param("sourceIp")

    @property
    def ip_country(self):
        return self.param("ipCountry")

    @property
    def payment_method(self):
        return self.param("payMethod")

    @property
    def remark(self):
        return self.param("remark")

    @property
    def merchant_id(self):
        return self.param("MerchantId")

    @property
    def paydollar_ref(self):
        return self.transaction_id

    @property
    def currency_code(self) -> Optional[str]:
        """Three-letter code for the numeric ``Cur`` field."""
        return alpha_currency_code(self.currency)

    @property
    def transaction_time(self):
        """``TxTime`` as sent; :attr:`received_at` is the parsed form."""
        return self.param("TxTime")

    @property
    def eci(self):
        return self.param("eci")

    @property
    def alert_code(self):
        return self.param("AlertCode")

    @property
    def pan_first4(self):
        return self.param("panFirst4")

    @property
    def pan_last4(self):
        return self.param("panLast4")

    @property
    def account_hash(self):
        return self.param("accountHash")

    @property
    def account_hash_algo(self):
        return self.param("accountHashAlgo")

    @property
    def card_issuing_country(self):
        return self.param("cardIssuingCountry")

    @property
    def channel_type(self):
        """``SPC`` for client post, ``DPC`` for direct post, ``SCH`` for schedule payments."""
        return self.param("channelType")

    @property
    def air_ticket_number(self):
        return self.param("airline_ticketNumber")

    # Multi-currency processing (MPS)

    @property
    def mps_amount(self):
        return self.param("mpsAmt")

    @property
    def mps_currency(self):
        return self.param("mpsCur")

    @property
    def mps_foreign_amount(self):
        return self.param("mpsForeignAmt")

    @property
    def mps_foreign_currency(self):
        return self.param("mpsForeignCur")

    @property
    def mps_exchange_rate(self):
        return self.param("mpsRate")

    @property
    def master_schedule_payment_id(self):
        return self.param("mSchPayId")

    @property
    def detail_schedule_payment_id(self):
        return self.param("dSchPayId")

    @property
    def installment_period(self):
        """Installment period in months."""
        return self.param("installment_period")

    @property
    def installment_first_pay_amount(self):
        return self.param("installment_firstPayAmt")

    @property
    def installment_each_pay_amount(self):
        return self.param("installment_eachPayAmt")

    @property
    def installment_last_pay_amount(self):
        return self.param("installment_lastPayAmt")

    def acknowledge(self) -> bool:
        if not self.config.secret:
            logger.info("PayDollar datafeed for %s accepted without secure hash", self.item_id)
            return self.is_complete
        return super().acknowledge()


__all__ = ["NAME", "Helper", "Notification"]
