"""Tradepost - order settlement and fulfillment for a multi-vendor marketplace."""

__version__ = "1.0.0"
