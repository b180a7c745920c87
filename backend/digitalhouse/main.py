from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from digitalhouse.core.config import settings
from digitalhouse.core.logging import setup_logging
from digitalhouse.core.exceptions import (
    HelpDeskError,
    global_exception_handler,
    help_desk_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from digitalhouse.api.v1 import auth, features, help_requests

# Setup Logging
setup_logging()
logger = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager for the application.
    """
    logger.info("startup", project=settings.PROJECT_NAME, features=settings.ENABLED_FEATURES)
    yield
    logger.info("shutdown")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    description="Community platform API: help desk and emergency assistance",
    lifespan=lifespan,
    docs_url=f"{settings.API_V1_STR}/docs",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

# Middleware: CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exception Handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HelpDeskError, help_desk_exception_handler)

# Health Check
@app.get("/health", tags=["system"])
async def health_check():
    """
    Public health check endpoint for load balancers.
    """
    return {"status": "ok", "environment": settings.ENVIRONMENT}


app.include_router(auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["auth"])
app.include_router(features.router, prefix=f"{settings.API_V1_STR}/features", tags=["system"])
app.include_router(help_requests.router, prefix=f"{settings.API_V1_STR}/help-requests", tags=["help-requests"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("digitalhouse.main:app", host="0.0.0.0", port=8000, reload=True)
