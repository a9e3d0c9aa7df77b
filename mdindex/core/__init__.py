"""Core - configuration and exceptions"""
from .config import (
    LLMFunction,
    MarkdownOptions,
    Settings,
    load_markdown_config,
    settings,
)
from .exceptions import ConfigurationError, MdIndexError

__all__ = [
    "LLMFunction",
    "MarkdownOptions",
    "Settings",
    "load_markdown_config",
    "settings",
    "ConfigurationError",
    "MdIndexError",
]
