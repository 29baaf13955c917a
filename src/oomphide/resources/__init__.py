"""Packaged resources for oomphide."""

from __future__ import annotations

from importlib import resources

SPLASH = "splash.bmp"

__all__ = ["SPLASH", "splash_bytes"]


def splash_bytes() -> bytes:
    """Return the splash bitmap shown while the IDE starts."""

    return (resources.files(__name__) / SPLASH).read_bytes()
