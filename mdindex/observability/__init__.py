"""Observability - structured logging"""
from .logging import setup_logging, get_logger

__all__ = [
    "setup_logging", "get_logger",
]
