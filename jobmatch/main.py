from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import logging and middleware
from jobmatch.utils.logging_config import configure_for_environment, get_logger
from jobmatch.utils.config import CORS_ORIGINS
from jobmatch.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)
from jobmatch.routers import matching, parser

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Job Match API starting up...")
    logger.info("Initializing database indexes...")

    try:
        from jobmatch.services.db import init_indexes
        await init_indexes()
        logger.info("Database indexes initialized successfully")
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - some operations may be slower without indexes")

    logger.info("Job Match API startup completed")

    yield

    logger.info("Job Match API shutting down...")


app = FastAPI(title="Job Match API", version="1.0.0", lifespan=lifespan)

# The last middleware added is the outermost; the exception handler wraps everything but CORS
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Job Match API", "version": "1.0.0", "status": "ok"}


@app.get("/health")
@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "OK", "timestamp": datetime.utcnow().isoformat()}


# Include routers
app.include_router(parser.router, prefix="/api")
app.include_router(matching.router, prefix="/api")

logger.info("Job Match API initialized successfully")
