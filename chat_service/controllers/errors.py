"""Translate repository errors into HTTP errors."""

from fastapi import HTTPException, status

from chat_service.repositories.errors import (
    AlreadyExistsError,
    CannotFindError,
    EmptyError,
    InvalidArgumentError,
    NotFoundError,
    RepositoryError,
)


def to_http_error(exc: RepositoryError) -> HTTPException:
    """Map a repository error to the matching HTTP status."""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyExistsError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, (EmptyError, CannotFindError, InvalidArgumentError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)
    )
