"""Errors raised by store operations.

Every error carries the exit status the CLI terminates with.
"""


class CryptError(Exception):
    """Base error for the crypt vault."""
    exit_code = 1


class InputError(CryptError):
    """Bad or missing arguments, or an unreadable source file."""
    exit_code = 2


class NotFound(CryptError):
    """The referenced record does not exist."""
    exit_code = 3

    def __init__(self, name: str):
        super().__init__(f"Could not find file: {name}")
        self.name = name


class AuthFailure(CryptError):
    """Password did not match the stored digest."""
    exit_code = 4

    def __init__(self, message: str = "Wrong password, exiting.."):
        super().__init__(message)


class PersistenceError(CryptError):
    """The store document (or a record in it) is unreadable or unwritable."""
    exit_code = 5
