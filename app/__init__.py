"""Tally sales gateway application package."""
