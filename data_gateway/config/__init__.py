from .config import DatabaseConfig

__all__ = ["DatabaseConfig"]
