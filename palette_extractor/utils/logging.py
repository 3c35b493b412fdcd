"""
Palette Extractor Structured Logging
Centralized logging configuration using loguru.
"""
import sys
from typing import Dict, Any, Optional

from loguru import logger as _loguru_logger

from palette_extractor.config import config


class StructuredLogger:
    """Structured logger for the palette extraction service."""
    
    def __init__(self, level: Optional[str] = None):
        """Initialize structured logger."""
        self._level = level or config.LOG_LEVEL
        self._configure_logger()
    
    def _configure_logger(self):
        """Configure loguru logger with structured format."""
        # Remove default handler
        _loguru_logger.remove()
        
        _loguru_logger.add(
            sys.stdout,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message} | {extra}",
            level=self._level,
            serialize=False  # Set to True for JSON output
        )
    
    def _emit(self, level: str, message: str, extra: Optional[Dict[str, Any]]):
        bound = _loguru_logger.bind(**extra) if extra else _loguru_logger
        # Depth 2 attributes the record to the caller, not this wrapper
        bound.opt(depth=2).log(level, message)
    
    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log info message with optional extra data."""
        self._emit("INFO", message, extra)
    
    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log warning message with optional extra data."""
        self._emit("WARNING", message, extra)
    
    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log error message with optional extra data."""
        self._emit("ERROR", message, extra)
    
    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        """Log debug message with optional extra data."""
        self._emit("DEBUG", message, extra)


# Global logger instance
_logger: Optional[StructuredLogger] = None


def get_logger() -> StructuredLogger:
    """Get or create global logger instance."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger()
    return _logger


logger = get_logger()
