"""Recurring service billing for a digital agency back-office."""

__version__ = "0.1.0"
