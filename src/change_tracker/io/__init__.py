from .errors import LoaderError
from .settings_loader import load_settings

__all__ = ["LoaderError", "load_settings"]
