"""Endpoints for registering and looking up users."""

from typing import Dict

from fastapi import APIRouter, Depends, status
from pymongo.database import Database

from chat_service.controllers.errors import to_http_error
from chat_service.repositories.errors import RepositoryError
from chat_service.repositories.interactions.dependencies import get_db
from chat_service.repositories.interactions.models.user_model import User
from chat_service.repositories.interactions.schemas.user_schema import UserCreate
from chat_service.services.interactions.users_services import (
    UsersService,
    get_users_service,
)

users_router = APIRouter(prefix="/users", tags=["Users"])


@users_router.post("", status_code=status.HTTP_201_CREATED)
def register_user(
    data: UserCreate,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    users_service: UsersService = Depends(get_users_service),
) -> User:
    try:
        return users_service.register(db, data)
    except RepositoryError as e:
        raise to_http_error(e) from e


@users_router.get("/{user_id}")
def get_user(
    user_id: str,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    users_service: UsersService = Depends(get_users_service),
) -> User:
    try:
        return users_service.get(db, user_id)
    except RepositoryError as e:
        raise to_http_error(e) from e


@users_router.get("/{user_id}/exists")
def user_exists(
    user_id: str,
    db: Database = Depends(get_db),  # type: ignore[type-arg]
    users_service: UsersService = Depends(get_users_service),
) -> Dict[str, bool]:
    try:
        return {"exists": users_service.exists(db, user_id)}
    except RepositoryError as e:
        raise to_http_error(e) from e
