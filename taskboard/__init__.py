from .config import Settings
from .server import create_app

__all__ = ["Settings", "create_app"]
