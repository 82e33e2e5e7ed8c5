"""FastAPI application."""

import argparse
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chat_service.configs import get_settings
from chat_service.controllers.chats_controllers import chats_router
from chat_service.controllers.users_controllers import users_router
from chat_service.logger_config import get_logger
from chat_service.repositories.interactions.crud.chats_crud import CRUDChat
from chat_service.repositories.interactions.crud.users_crud import CRUDUser
from chat_service.repositories.interactions.database import get_client, get_database

logger = get_logger(__name__, get_settings().LOG_LEVEL)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Create indexes on startup and release the client pool on shutdown."""
    logger.info("Creating database indexes...")
    db = get_database()
    CRUDChat().ensure_indexes(db)
    CRUDUser().ensure_indexes(db)
    logger.info("Database indexes created successfully!")
    yield
    logger.info("Closing MongoDB client...")
    get_client().close()


def create_app() -> FastAPI:
    """Build the application with its routers."""
    settings = get_settings()
    app = FastAPI(
        title="Chat Service API",
        root_path=settings.ROOT_PATH_BACKEND,
        description="Storage endpoints for chats, memberships and users",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(chats_router)
    app.include_router(users_router)

    @app.get("/", response_description="Api healthcheck")  # type: ignore[misc]
    async def index() -> Dict[str, str]:
        """Define a route for handling HTTP GET requests to the root URL ("/")."""
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--docker", action="store_true", help="Running with docker")
    parser.add_argument("--host", required=True, help="Application host.")
    parser.add_argument("--port", required=True, help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()
    if not args.docker:
        from dotenv import load_dotenv

        load_dotenv(".env")
        get_settings.cache_clear()

    logger.info("Starting FastAPI application...")
    uvicorn.run(
        "chat_service.app:app", host=args.host, port=int(args.port), reload=args.reload
    )
