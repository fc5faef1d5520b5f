"""Signed, optionally encrypted cookie values."""
