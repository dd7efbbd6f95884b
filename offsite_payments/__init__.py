"""Hosted payment page integrations and a callback service to receive them."""

__version__ = "0.1.0"
