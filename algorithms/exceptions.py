"""
Errors raised by the matching algorithms
"""


class InvalidInput(ValueError):
    """Raised when a value handed to the matching engine has the wrong type"""
