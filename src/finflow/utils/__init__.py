"""Utility functions for finflow."""

from finflow.utils.amount_parser import parse_amount
from finflow.utils.preferences import PreferenceStore

__all__ = ["parse_amount", "PreferenceStore"]
