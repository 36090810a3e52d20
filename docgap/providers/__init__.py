"""Vendor and storage provider implementations."""
