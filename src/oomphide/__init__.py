"""oomphide: reproducible Eclipse IDE installs driven by a build descriptor."""

__version__ = "0.1.0"
