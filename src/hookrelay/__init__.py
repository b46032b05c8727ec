"""Verifies, filters and relays GitHub webhook deliveries to MS Teams."""

__version__ = "1.0.0"
