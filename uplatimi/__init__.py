"""uplatimi: payment-slip form state, share links and HUB3 slip payloads."""

__version__ = "0.1.0"
