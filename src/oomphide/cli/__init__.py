"""Command line interface for oomphide."""
