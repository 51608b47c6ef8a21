"""Brokerage CRM - approval-gated record store for inventory and project masters."""

__version__ = "1.0.0"
