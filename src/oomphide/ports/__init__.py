"""Ports implemented by oomphide adapters."""
