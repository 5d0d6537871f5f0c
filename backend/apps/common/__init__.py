from .logger import AppLogger, get_logger

__all__ = ["AppLogger", "get_logger"]
