"""
Logging configuration for the RestStop routing engine
"""

import logging
import os
import sys
from typing import Optional


class RestStopLogger:
    """Centralized logging for the RestStop routing engine"""

    def __init__(self, name: str = "reststoprouting", level: str = "INFO", log_file: Optional[str] = None):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))

        # Prevent duplicate handlers
        if not any(not isinstance(h, logging.NullHandler) for h in self.logger.handlers):
            self._setup_handlers(log_file)

    def _setup_handlers(self, log_file: Optional[str]):
        """Setup console and optional file handlers"""
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        console_handler.setFormatter(console_format)
        self.logger.addHandler(console_handler)

        if log_file:
            self.add_file_handler(log_file)

    def add_file_handler(self, log_file: str):
        """Also write DEBUG and above to log_file; a path already attached is skipped"""
        path = os.path.abspath(log_file)
        for handler in self.logger.handlers:
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == path:
                return

        log_dir = os.path.dirname(path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(path)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        file_handler.setFormatter(file_format)
        self.logger.addHandler(file_handler)

    def info(self, message: str):
        """Log info message"""
        self.logger.info(message)

    def debug(self, message: str):
        """Log debug message"""
        self.logger.debug(message)

    def warning(self, message: str):
        """Log warning message"""
        self.logger.warning(message)

    def error(self, message: str):
        """Log error message"""
        self.logger.error(message)

    def log_route_request(self, origin: str, destination: str, mode: str,
                          duration_ms: float, success: bool):
        """Log route request metrics"""
        self.info(f"Route request: {origin!r} -> {destination!r}, mode={mode}, "
                  f"duration={duration_ms:.2f}ms, success={success}")

    def log_api_call(self, api_name: str, duration_ms: float, success: bool):
        """Log API call metrics"""
        self.info(f"API call: {api_name}, duration={duration_ms:.2f}ms, success={success}")


# Global logger instance
logger = RestStopLogger(level=os.getenv('LOG_LEVEL', 'INFO'), log_file=os.getenv('LOG_FILE'))
