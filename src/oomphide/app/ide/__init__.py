"""IDE setup application services."""

from .descriptor import DESCRIPTOR_FILENAME, load_model
from .internal_setup import InternalSetupDelegate, InternalSetupError, SetupAction
from .service import IdeSetupError, IdeSetupService

__all__ = [
    "DESCRIPTOR_FILENAME",
    "IdeSetupError",
    "IdeSetupService",
    "InternalSetupDelegate",
    "InternalSetupError",
    "SetupAction",
    "load_model",
]
