from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app.config import get_settings
from app.database import engine, Base
from app.exceptions import StorageError
from app.api import products, stock, sales, dashboard, health

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up application...")

    # Create database tables
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="""
    Inventory and point-of-sale record manager with:

    - **Products**: Create, list, update and delete stocked items
    - **Stock Transactions**: Replenish products with an immutable audit trail
    - **Sales**: Record, correct and delete sales

    ## Stock Conservation
    A product's quantity always equals its initial stock plus all stock
    additions minus all recorded sales. Correcting or deleting a sale first
    returns its old quantity to stock, then applies the new effect.

    ## Storage
    The whole ledger is kept as a single JSON snapshot. Every request loads
    it under an exclusive lock and a mutation is only acknowledged after the
    snapshot has been written back.
    """,
    version=settings.APP_VERSION,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    },
    lifespan=lifespan
)


def add_cors(application: FastAPI, frontend_url: str) -> None:
    """Allow cross-origin calls from `frontend_url`, or from any origin when it is "*"."""
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if frontend_url == "*" else [frontend_url],
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )


# Add CORS middleware
add_cors(app, settings.FRONTEND_URL)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input (e.g. non-positive quantities) as 400 Bad Request."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    """Log storage failures and hide their details from the caller."""
    logger.error(
        f"{request.method} {request.url.path} failed: {exc}",
        exc_info=exc.original_exception or exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"}
    )


# Include API routers
app.include_router(health.router)
app.include_router(dashboard.router)
app.include_router(products.router)
app.include_router(stock.router)
app.include_router(sales.router)


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
