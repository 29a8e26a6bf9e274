"""Merchant Admin API."""
