"""Telldus hub to smart-home accessory bridge."""

__version__ = "0.1.0"
