"""IDE install domain exports."""

from .model import PROJECT_FILE, IdeConfigurationError, IdeModel
from .staleness import STALE_TOKEN, StalenessToken, fingerprint
from .value_objects import IdeLayout, NativePlatform, P2Model, TargetPlatform

__all__ = [
    "IdeConfigurationError",
    "IdeLayout",
    "IdeModel",
    "NativePlatform",
    "P2Model",
    "PROJECT_FILE",
    "STALE_TOKEN",
    "StalenessToken",
    "TargetPlatform",
    "fingerprint",
]
