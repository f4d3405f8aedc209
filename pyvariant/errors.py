"""Exceptions raised by pyvariant."""


class Error(Exception):
    """Base class for all pyvariant errors."""
    pass


class IncorrectTypeError(Error, TypeError):
    """A value's signature does not match the signature that was
    expected, or a stored value can not be viewed as the requested
    native type."""
    pass


class SignatureError(Error, ValueError):
    """A string is not a well-formed signature."""
    pass
