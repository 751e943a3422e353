"""
Main application entry point for the CRM API.

This module configures logging, initializes the FastAPI application,
sets up CORS and request-timing middleware, registers the error handlers
and includes the routers for authentication, contacts and the dashboard.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- crm.database: Database engine
- crm.models: SQLAlchemy models
- crm.auth: Registration, login and the bearer-token gate
- crm.contacts: Contacts router
- crm.dashboard: Dashboard router
- crm.errors: Error taxonomy and handlers
- crm.core: Application settings
"""

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm.core import get_settings
from crm.database import engine
from crm import models, contacts, dashboard
from crm.auth import router as auth_router
from crm.errors import register_exception_handlers
from crm.middleware import register_middleware

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

# Create tables (for development only)
models.Base.metadata.create_all(bind=engine)
logger.info("Database ready at %s", engine.url.render_as_string(hide_password=True))

# Initialize FastAPI application
app = FastAPI(title="CRM API")

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_middleware(app)
register_exception_handlers(app)

# Include routers for application areas
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(contacts.router, prefix=settings.API_PREFIX)
app.include_router(dashboard.router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """
    Root endpoint for the API.

    Returns a simple JSON message directing users to the Swagger UI.

    Returns:
        dict: JSON message with information about the API
    """
    return {"msg": "CRM API. Visit /docs for Swagger UI"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
