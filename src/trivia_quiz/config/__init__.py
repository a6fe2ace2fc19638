from .loader import load_settings
from .schema import Settings

__all__ = ["Settings", "load_settings"]
