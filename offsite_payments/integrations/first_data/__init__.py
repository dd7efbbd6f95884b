"""First Data Global Gateway e4 Payment Pages.

The payment pages speak the Authorize.Net SIM protocol, so the helper and
relay-response notification are the SIM ones pointed at First Data's hosts.

Credentials: ``account`` is the payment page ID (``x_login``),
``credential2`` the transaction key and ``secret`` the response key used to
verify relay responses.
"""

from ...config import IntegrationMode
from ..authorize_net_sim import Helper as SimHelper
from ..authorize_net_sim import Notification as SimNotification

NAME = "first_data"

SERVICE_URLS = {
    IntegrationMode.TEST: "https://demo.globalgatewaye4.firstdata.com/payment",
    IntegrationMode.PRODUCTION: "https://checkout.globalgatewaye4.firstdata.com/payment",
}


class Helper(SimHelper):
    integration_name = NAME
    service_urls = SERVICE_URLS


class Notification(SimNotification):
    integration_name = NAME


__all__ = ["NAME", "Helper", "Notification"]
