"""
tokendao Exceptions

Root exception classes shared by the token, governance and config layers.
"""


class DAOException(Exception):
    """Base exception for tokendao."""
    pass


class InvalidAddressError(DAOException, ValueError):
    """Invalid address format."""
    pass


class ConfigurationError(DAOException):
    """Configuration error."""
    pass
