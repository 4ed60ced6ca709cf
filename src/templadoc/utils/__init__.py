from .config import Config
from .file_handler import FileHandler
from .logger import setup_logger, setup_logging

__all__ = [
    "Config",
    "FileHandler",
    "setup_logger",
    "setup_logging",
]
