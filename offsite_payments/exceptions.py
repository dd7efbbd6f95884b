"""Exceptions raised by offsite payment integrations."""


class IntegrationError(Exception):
    """Base exception for integration-related errors."""
    pass


class ConfigurationError(IntegrationError):
    """Raised when an integration is missing credentials it needs."""
    pass


class UnknownIntegration(IntegrationError):
    """Raised when no integration is registered under a name."""
    pass


class UnknownField(IntegrationError):
    """Raised when a canonical field name has no declared wire name."""
    pass


class DuplicateMapping(IntegrationError):
    """Raised when a canonical field name is declared twice."""
    pass


class FrozenMapping(IntegrationError):
    """Raised when declaring into a field mapping that has been frozen."""
    pass


class InvalidStatusTable(IntegrationError):
    """Raised when a status table maps a code to a non-canonical status."""
    pass


class MissingRequiredField(IntegrationError):
    """Raised when an outbound request lacks a field the provider requires."""

    def __init__(self, canonical_name: str, wire_name: str) -> None:
        super().__init__(
            f"Missing required field {canonical_name!r} (wire name {wire_name!r})"
        )
        self.canonical_name = canonical_name
        self.wire_name = wire_name


class MalformedPayload(IntegrationError):
    """Raised when an inbound callback body cannot be decoded."""
    pass


class UnknownStatusCode(IntegrationError):
    """Raised (strict mode only) for a provider status code with no mapping."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unknown status code: {code!r}")
        self.code = code


class SignatureMismatch(IntegrationError):
    """Raised by the callback service when a notification fails acknowledgement."""
    pass
