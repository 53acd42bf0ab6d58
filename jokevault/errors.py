"""
Error kinds and exception hierarchy for jokevault.

Every failure the import path can produce is tagged with an ErrorKind.
The dispatcher turns the kind into the process exit code.
"""

from enum import Enum


class ErrorKind(Enum):
    """Failure categories. Values double as process exit codes."""

    UNEXPECTED = 1
    WRONG_ARGUMENTS = 2
    INVALID_COUNT = 3
    TOO_MANY_JOKES = 4
    MALFORMED_RESPONSE = 5
    EXHAUSTED_SUPPLY = 6
    API_UNAVAILABLE = 7
    STORAGE_FAILURE = 8

    @property
    def exit_code(self) -> int:
        return self.value


class JokeVaultError(Exception):
    """Base class for all jokevault errors."""

    kind = ErrorKind.UNEXPECTED


class InvalidCountError(JokeVaultError):
    """Raised when the import count is not a usable integer."""

    kind = ErrorKind.INVALID_COUNT


class TooManyJokesError(JokeVaultError):
    """Raised when more jokes are requested than one run may import."""

    kind = ErrorKind.TOO_MANY_JOKES


class DeserializationError(JokeVaultError):
    """Raised when the API response cannot be turned into a joke."""

    kind = ErrorKind.MALFORMED_RESPONSE


class ExhaustedSupplyError(JokeVaultError):
    """Raised when every fetch attempt returned an already stored joke."""

    kind = ErrorKind.EXHAUSTED_SUPPLY


class ApiError(JokeVaultError):
    """Raised on HTTP errors, timeouts and connection failures."""

    kind = ErrorKind.API_UNAVAILABLE


class StorageError(JokeVaultError):
    """Raised when the database rejects a read or write."""

    kind = ErrorKind.STORAGE_FAILURE


class ImportCountMismatchError(StorageError):
    """Raised when the rows written do not match the requested count."""


class UnsupportedDatabaseError(StorageError):
    """Raised when the identity sequence cannot be reset for a dialect."""
