"""Booking eligibility, pricing and booking ledger for rental listings."""

__version__ = "0.1.0"
