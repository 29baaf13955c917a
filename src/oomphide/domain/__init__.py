"""Domain layer for oomphide."""
