from .config import Settings, get_settings
from .data_loader import DataLoader
from .logging import setup_logging, get_logger

__all__ = ["Settings", "get_settings", "DataLoader", "setup_logging", "get_logger"]
