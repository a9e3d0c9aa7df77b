"""mdindex custom exceptions."""


class MdIndexError(Exception):
    """Base exception for all mdindex errors."""


class ConfigurationError(MdIndexError, ValueError):
    """Invalid or incomplete conversion options."""
