"""
Main FastAPI Application
=======================

Entry point for the CRS transform API server.
"""

import uvicorn
import logging
import os
import sys
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv
load_dotenv()  # Load .env file before settings are read

from api.router import api_router
from services.logging_service import init_logging
from pipelines.mapping.projection import ProjectionContext


# Custom colored formatter for better log readability
class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for better log readability"""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'      # Reset
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')
        reset = self.COLORS['RESET']
        message = super().format(record)
        return f"{color}{message}{reset}"


def setup_logging():
    """Console logging with colored levels"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColoredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('uvicorn.error').setLevel(logging.WARNING)


def create_app(context: ProjectionContext = None) -> FastAPI:
    """
    Build the API application around a projection context

    Args:
        context: Engine state to serve; a fresh ProjectionContext when omitted
    """
    app = FastAPI(
        title="CRS Transform API",
        description="Coordinate reference system transforms, affine corrections and projection definitions",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.projection_context = context if context is not None else ProjectionContext()
    app.include_router(api_router)

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses"""
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logging.getLogger(__name__).error(f"❌ Unhandled exception: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if app.debug else "An unexpected error occurred"
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "CRS Transform API v1.0",
            "status": "running",
            "docs": "/docs"
        }

    return app


setup_logging()
try:
    # Add rotating file + ring buffer handlers
    init_logging()
except OSError as e:
    # Do not fail startup if file logging isn't available
    logging.getLogger(__name__).warning(f"⚠️ File logging unavailable: {e}")
    init_logging(log_to_file=False)
logger = logging.getLogger(__name__)

app = create_app()


def main():
    logger.info("🔧 Starting CRS Transform API Server in development mode")

    uvicorn.run(
        "main:app",
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=False,
        log_level="info",
        access_log=True
    )


if __name__ == "__main__":
    main()
