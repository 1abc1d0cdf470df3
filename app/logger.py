"""
Logging entry point used across the application.
"""

from app.utils.logger import JsonFormatter, get_logger

__all__ = ['JsonFormatter', 'get_logger']
