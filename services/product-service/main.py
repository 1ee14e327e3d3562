"""
product-service/main.py - Product Catalog REST API

PURPOSE:
    Exposes CRUD operations over the product catalog stored in PostgreSQL.
    Validates every request before it reaches the database and answers with
    JSON envelopes: {"data": ...} on success, {"errors": [...]} on validation
    failure, {"error": "..."} when a product does not exist.

API ENDPOINTS:
    GET    /api/products        - List all products (highest id first)
    GET    /api/products/{id}   - Get product details
    POST   /api/products        - Create product ({name, price})
    PUT    /api/products/{id}   - Replace product ({name, price, availability})
    PATCH  /api/products/{id}   - Toggle availability
    DELETE /api/products/{id}   - Delete product
    GET    /health              - Health check
    GET    /docs                - Interactive API documentation (OpenAPI)

DATABASE:
    - PostgreSQL table: products
      Columns: id, name, price, availability, created_at, updated_at
    - Tables are created at startup. If the database cannot be reached the
      error is logged and the service keeps serving (requests that need the
      database fail with 500). Set DB_FAIL_FAST=true to abort startup instead.

CORS:
    Only the origin in FRONTEND_URL may call the API from a browser. Requests
    from any other origin get 403 before reaching a route.

TESTING COMMANDS:
    1. Create a product:
        curl -X POST http://localhost:8000/api/products \
          -H "Content-Type: application/json" \
          -d '{"name": "Mouse", "price": 40}'

    2. List products:
        curl http://localhost:8000/api/products

    3. Replace a product:
        curl -X PUT http://localhost:8000/api/products/1 \
          -H "Content-Type: application/json" \
          -d '{"name": "Mouse Pro", "price": 55, "availability": true}'

    4. Toggle availability:
        curl -X PATCH http://localhost:8000/api/products/1

    5. Delete a product:
        curl -X DELETE http://localhost:8000/api/products/1

USAGE:
    python main.py
    or: uvicorn main:create_app --factory --port 8000
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, Request  # Web framework
from pydantic_settings import BaseSettings  # Configuration management
from sqlalchemy.ext.asyncio import AsyncEngine

# Add shared library to path for common utilities
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "shared"))

from database import build_database_url, create_engine, create_session_factory  # Async SQLAlchemy setup
from logging_config import setup_logging  # Centralized logging

from exceptions import register_exception_handlers
from middleware import register_middleware
from models import Base
from routes import router
from schemas import HealthResponse

SERVICE_NAME = "product-service"
SERVICE_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings, read from the environment."""

    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"
    postgres_db: str = "products"
    db_echo: bool = False
    db_fail_fast: bool = False
    frontend_url: Optional[str] = None
    product_service_port: int = 8000
    log_level: str = "INFO"

    @property
    def sqlalchemy_url(self) -> str:
        return build_database_url(
            self.postgres_user,
            self.postgres_password,
            self.postgres_host,
            self.postgres_port,
            self.postgres_db,
            url=self.database_url,
        )

    @property
    def allowed_origins(self) -> List[str]:
        return [self.frontend_url] if self.frontend_url else []


async def connect_db(engine: AsyncEngine, fail_fast: bool = False) -> bool:
    """Create tables. Returns False (or raises, with fail_fast) if the database is unreachable."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"An error occurred with the connection to the DB: {e}")
        if fail_fast:
            raise
        return False

    logger.info("Database connected")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage app lifecycle."""
    logger.info("Starting Product Service...")
    app.state.db_ready = await connect_db(app.state.engine, fail_fast=app.state.settings.db_fail_fast)

    yield

    logger.info("Shutting down Product Service...")
    await app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Called once at process start."""
    settings = settings or Settings()
    setup_logging(SERVICE_NAME, level=settings.log_level)

    app = FastAPI(title="Product Service", version=SERVICE_VERSION, lifespan=lifespan, docs_url="/docs")

    engine = create_engine(settings.sqlalchemy_url, echo=settings.db_echo)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.db_ready = False

    register_middleware(app, settings.allowed_origins)
    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/health", response_model=HealthResponse)
    async def health(request: Request) -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="ok",
            service=SERVICE_NAME,
            version=SERVICE_VERSION,
            database="ok" if request.app.state.db_ready else "unavailable",
        )

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.product_service_port)
