"""
Contract tests to verify every registered integration follows the shared
Helper / Notification / Return shape.
"""

import pytest

from offsite_payments.config import ProviderConfig
from offsite_payments.exceptions import UnknownIntegration
from offsite_payments.integrations import (
    INTEGRATIONS,
    Helper,
    Notification,
    Return,
    get_integration,
    helper,
    notification,
    return_,
)
from offsite_payments.integrations.base import BlankPolicy, NotificationFields
from offsite_payments.integrations.mapping import FieldMapping
from offsite_payments.integrations.status import StatusTable


def all_integrations():
    return sorted(INTEGRATIONS)


class TestIntegrationContract:

    def test_registry_contents(self):
        assert set(INTEGRATIONS) == {
            "okpay",
            "skrill",
            "paydollar",
            "authorize_net_sim",
            "first_data",
            "payu_in",
            "cybersource_secure_acceptance",
        }

    def test_unknown_integration(self):
        with pytest.raises(UnknownIntegration):
            get_integration("paypal")

    @pytest.mark.parametrize("name", all_integrations())
    def test_module_names_match_registry(self, name):
        module = get_integration(name)

        assert module.NAME == name
        assert module.Helper.integration_name == name
        assert module.Notification.integration_name == name

    @pytest.mark.parametrize("name", all_integrations())
    def test_helper_declarations(self, name):
        helper_class = get_integration(name).Helper

        assert issubclass(helper_class, Helper)
        assert isinstance(helper_class.mapping, FieldMapping)
        assert helper_class.mapping.frozen, f"{name} mapping is not frozen"
        assert isinstance(helper_class.blank_policy, BlankPolicy)
        assert helper_class.service_urls, f"{name} declares no service URLs"
        for canonical_name in helper_class.required_fields:
            assert canonical_name in helper_class.mapping, f"{name} requires undeclared {canonical_name}"
        if helper_class.recipe is not None:
            assert helper_class.signature_field

    @pytest.mark.parametrize("name", all_integrations())
    def test_notification_declarations(self, name):
        notification_class = get_integration(name).Notification

        assert issubclass(notification_class, Notification)
        assert isinstance(notification_class.fields, NotificationFields)
        assert isinstance(notification_class.status_table, StatusTable)
        assert notification_class.fields.item_id
        assert notification_class.fields.status

    @pytest.mark.parametrize("name", all_integrations())
    def test_empty_payload_is_safe(self, name):
        parsed = notification(name, b"", config=ProviderConfig())

        assert parsed.item_id is None
        assert parsed.is_complete is False

    @pytest.mark.parametrize("name", all_integrations())
    def test_return_factory(self, name):
        assert isinstance(return_(name, b"", config=ProviderConfig()), Return)

    def test_helper_factory(self, okpay_config):
        built = helper("okpay", "1001", okpay_config, amount="1", currency="USD")

        assert dict(built.form_fields())["ok_invoice"] == "1001"
