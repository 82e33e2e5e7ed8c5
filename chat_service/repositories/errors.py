"""Error vocabulary shared by the repositories.

Repositories raise these instead of driver exceptions. Storage faults are
chained to the original ``pymongo`` error so the root cause stays visible.
"""

from typing import Optional


class RepositoryError(Exception):
    """Base class for every repository failure."""


class EmptyError(RepositoryError):
    """Raised when a required input is missing."""

    def __init__(self, message: str = "empty") -> None:
        super().__init__(message)


class NotFoundError(RepositoryError):
    """Raised when a lookup matched zero documents."""

    def __init__(self, message: str = "not found") -> None:
        super().__init__(message)


class CannotFindError(RepositoryError):
    """Raised when lookup criteria are insufficient to search at all."""

    def __init__(self, message: str = "cannot find") -> None:
        super().__init__(message)


class AlreadyExistsError(RepositoryError):
    """Raised when a record with the same unique fields is already stored."""

    def __init__(self, message: str = "already exists") -> None:
        super().__init__(message)


class InvalidArgumentError(RepositoryError):
    """Raised when a request carries invalid data."""

    def __init__(self, message: str = "invalid argument") -> None:
        super().__init__(message)


class InternalError(RepositoryError):
    """Raised on an unexpected storage fault."""

    def __init__(self, message: str = "internal error") -> None:
        super().__init__(message)


class CursorCloseError(InternalError):
    """Raised when a result cursor could not be closed after a successful scan."""

    def __init__(self, message: str = "failed to close cursor") -> None:
        super().__init__(message)


class TransactionError(InternalError):
    """The transactional write failed and was rolled back.

    Attributes:
        cause (Optional[BaseException]): The error that triggered the rollback.
    """

    def __init__(
        self, message: str = "transaction failed", cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message)
        self.cause = cause


class TransactionAbortError(InternalError):
    """The transactional write failed and the rollback failed as well.

    Storage may be left inconsistent; this needs operator attention.

    Attributes:
        cause (BaseException): The error that triggered the rollback.
        abort_error (BaseException): The error raised while aborting.
    """

    def __init__(self, cause: BaseException, abort_error: BaseException) -> None:
        super().__init__(
            f"failed to abort transaction ({abort_error}) after: {cause}"
        )
        self.cause = cause
        self.abort_error = abort_error
