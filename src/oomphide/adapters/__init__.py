"""Adapters binding oomphide to external tools and formats."""
