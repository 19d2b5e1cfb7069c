"""Helpers shared across the updater packages."""
