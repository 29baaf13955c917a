"""Application services for oomphide."""
