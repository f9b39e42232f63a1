"""FastAPI application serving the Kindle library to the browser UI."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from strawberry.fastapi import GraphQLRouter

from api.dependencies import get_cover_resolver
from api.resolvers.books import get_context
from api.routes import router, validation_error_handler
from api.schema import schema
from common.constants import COVERS_URL_PREFIX
from common.env import ensure_directories, env
from common.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_directories()
    logger.info(f"Reading clippings from {env.clippings_path()}")
    logger.info(f"Caching covers in {env.covers_dir()}")
    yield
    get_cover_resolver().close()


def create_app() -> FastAPI:
    """Build the application: REST routes, GraphQL, cover and UI static files."""
    app = FastAPI(
        title="Kindle Library API",
        description="Highlights from a Kindle clippings export, grouped by book",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=env.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # GraphQL endpoint
    graphql_app = GraphQLRouter(schema, context_getter=get_context)
    app.include_router(graphql_app, prefix="/graphql")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    # Mounted last: routes above take precedence
    app.mount(
        COVERS_URL_PREFIX,
        StaticFiles(directory=env.covers_dir(), check_dir=False),
        name="covers",
    )
    public_dir = env.public_dir()
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=public_dir, html=True), name="public")

    return app


app = create_app()
