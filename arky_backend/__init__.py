"""ARKY website backend: rate-limited chat and contact-form relays."""

__version__ = "1.0.0"
