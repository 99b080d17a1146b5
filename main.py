"""
Main application entry point for the Design CRM API.

This module initializes the FastAPI application, configures logging and
CORS, installs the error handlers, and includes routers for
authentication, users, contacts, lists and email dispatch.

Modules:
- FastAPI: Web framework
- CORSMiddleware: Middleware for handling CORS
- design_crm.database: Database engine
- design_crm.models: SQLAlchemy models
- design_crm.errors: Error taxonomy and handlers
- design_crm.auth: Login redirects and session verification
- design_crm.users: Users router
- design_crm.contacts: Contacts router
- design_crm.lists: Lists and memberships router
- design_crm.emails: Email dispatch router
- design_crm.core: Application settings
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from design_crm.database import engine
from design_crm import models, contacts, lists, emails
from design_crm.auth import router as auth_router
from design_crm.users import router as users_router
from design_crm.core import configure_logging, get_settings
from design_crm.errors import register_exception_handlers

configure_logging()

# Create tables (for development only)
models.Base.metadata.create_all(bind=engine)

settings = get_settings()

# Initialize FastAPI application
app = FastAPI(title="Design CRM API")

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include routers for application areas
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(contacts.router)
app.include_router(lists.router)
app.include_router(emails.router)


@app.get("/")
def root():
    """
    Root endpoint for the API.

    Returns a simple JSON message directing users to the Swagger UI.

    Returns:
        dict: JSON message with information about the API
    """
    return {"msg": "Design CRM API. Visit /docs for Swagger UI"}
