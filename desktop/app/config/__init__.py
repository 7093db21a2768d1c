from .settings import AppSettings
from .theme import COLORS, STYLESHEET

__all__ = ["AppSettings", "COLORS", "STYLESHEET"]
