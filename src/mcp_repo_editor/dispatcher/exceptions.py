"""
This module defines custom exceptions for the command dispatcher.
"""


class DispatcherException(Exception):
    """Base class for all dispatcher exceptions."""
    pass


class TransportError(DispatcherException):
    """Raised when the controller channel fails to connect, send or receive."""
    pass
