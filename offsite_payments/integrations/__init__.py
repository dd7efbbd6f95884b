"""Registry of the offsite payment integrations shipped with this package."""

from types import ModuleType
from typing import Any, Dict, Optional

from ..config import ProviderConfig
from ..exceptions import UnknownIntegration
from . import (
    authorize_net_sim,
    cybersource_secure_acceptance,
    first_data,
    okpay,
    payu_in,
    paydollar,
    skrill,
)
from .base import BlankPolicy, Helper, Notification, NotificationFields, NotificationReturn, Return

INTEGRATIONS: Dict[str, ModuleType] = {
    module.NAME: module
    for module in (
        okpay,
        skrill,
        paydollar,
        authorize_net_sim,
        first_data,
        payu_in,
        cybersource_secure_acceptance,
    )
}


def get_integration(name: str) -> ModuleType:
    """Return the integration module registered under ``name``.

    Raises:
        UnknownIntegration: If no integration has that name
    """
    try:
        return INTEGRATIONS[name]
    except KeyError:
        raise UnknownIntegration(f"Unknown integration: {name}") from None


def helper(name: str, order: str, config: ProviderConfig, **options: Any) -> Helper:
    return get_integration(name).Helper(order, config, **options)


def notification(
    name: str,
    raw_body: Any,
    content_type: Optional[str] = None,
    config: Optional[ProviderConfig] = None,
) -> Notification:
    return get_integration(name).Notification(raw_body, content_type, config)


def return_(
    name: str,
    raw_body: Any,
    content_type: Optional[str] = None,
    config: Optional[ProviderConfig] = None,
) -> Return:
    """Build the provider's Return, or the generic one if it has none."""
    return_class = getattr(get_integration(name), "Return", Return)
    return return_class(raw_body, content_type, config)


__all__ = [
    "INTEGRATIONS",
    "BlankPolicy",
    "Helper",
    "Notification",
    "NotificationFields",
    "NotificationReturn",
    "Return",
    "get_integration",
    "helper",
    "notification",
    "return_",
]
